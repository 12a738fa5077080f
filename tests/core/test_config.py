from __future__ import annotations

import pytest

from revisedlm.core import config


def test_load_toml_parses_tables(tmp_path):
    path = tmp_path / "s.toml"
    path.write_text('[api]\nmode = "custom"\n', encoding="utf-8")

    assert config.load_toml(path) == {"api": {"mode": "custom"}}


def test_load_toml_missing_file(tmp_path):
    with pytest.raises(config.TomlConfigError, match="not found"):
        config.load_toml(tmp_path / "absent.toml")


def test_load_toml_syntax_error(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[api\nmode = ", encoding="utf-8")

    with pytest.raises(config.TomlConfigError, match="Failed to parse"):
        config.load_toml(path)


def test_merge_defaults_overrides_nested_values():
    base = {"api": {"mode": "default", "custom_key": ""}, "debug": False}

    config.merge_defaults(base, {"api": {"mode": "openai"}, "debug": True})

    assert base == {"api": {"mode": "openai", "custom_key": ""}, "debug": True}


def test_merge_defaults_rejects_unknown_keys():
    base = {"api": {"mode": "default"}}

    with pytest.raises(config.TomlConfigError, match="api.theme"):
        config.merge_defaults(base, {"api": {"theme": "dark"}})


def test_merge_defaults_rejects_scalar_for_table():
    with pytest.raises(config.TomlConfigError, match="Expected table"):
        config.merge_defaults({"api": {"mode": "x"}}, {"api": "openai"})


def test_write_toml_template_creates_parents(tmp_path):
    target = tmp_path / "nested" / "dir" / "s.toml"

    config.write_toml_template(target, template="[api]\n")

    assert target.read_text(encoding="utf-8") == "[api]\n"
    with pytest.raises(config.TomlConfigError, match="already exists"):
        config.write_toml_template(target, template="[api]\n")
