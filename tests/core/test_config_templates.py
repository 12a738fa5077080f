from __future__ import annotations

import stat
from pathlib import Path

import pytest

from revisedlm.core import config_templates
from revisedlm.core.config import load_toml


def test_settings_template_is_valid_toml(tmp_path: Path) -> None:
    template = config_templates.get_template("settings")

    target = template.write(tmp_path / "revisedlm.toml")

    data = load_toml(target)
    assert data["api"]["mode"] == "default"
    assert data["quiz"]["quick_fire_timer"] == 30
    assert data["preferences"]["reduced_motion"] is False
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_template_write_refuses_to_clobber(tmp_path: Path) -> None:
    template = config_templates.get_template("settings")
    target = tmp_path / "revisedlm.toml"
    target.write_text("# mine\n", encoding="utf-8")

    with pytest.raises(config_templates.ConfigTemplateError):
        template.write(target)

    template.write(target, overwrite=True)
    assert target.read_text(encoding="utf-8") == template.read_text()


def test_iter_templates_lists_settings() -> None:
    names = [template.name for template in config_templates.iter_templates()]

    assert names == ["settings"]


@pytest.mark.parametrize("unknown", ["", "quizzer", "SETTINGS"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(config_templates.ConfigTemplateError):
        config_templates.get_template(unknown)
