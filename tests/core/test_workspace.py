from __future__ import annotations

import pytest

from revisedlm.core import workspace


def test_ensure_workspace_creates_config_and_logs(tmp_path, monkeypatch):
    root = tmp_path / "revision"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert set(layout.directories) == {"config", "logs"}
    assert all(path.is_dir() for _, path in layout.items())
    assert layout.created == {"home": True, "config": True, "logs": True}


def test_second_call_reports_existing_directories(tmp_path):
    root = tmp_path / "again"
    workspace.ensure_workspace(path=root)

    layout = workspace.ensure_workspace(path=root)

    assert not any(layout.created.values())


def test_explicit_path_beats_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "from-env"))

    layout = workspace.ensure_workspace(path=tmp_path / "explicit")

    assert layout.home == (tmp_path / "explicit").resolve()
    assert not (tmp_path / "from-env").exists()


def test_env_mapping_is_honoured(tmp_path):
    root = tmp_path / "mapped"

    layout = workspace.ensure_workspace(env={workspace.WORKSPACE_ENV: str(root)})

    assert layout.path_for("logs") == root.resolve() / "logs"


def test_without_create_nothing_is_written(tmp_path):
    root = tmp_path / "lazy"

    layout = workspace.ensure_workspace(path=root, create=False)

    assert not root.exists()
    assert layout.path_for("config") == root.resolve() / "config"


def test_file_in_place_of_workspace_errors(tmp_path):
    root = tmp_path / "occupied"
    root.write_text("not a directory", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=root)


def test_path_for_unknown_key(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path / "w", create=False)

    with pytest.raises(KeyError):
        layout.path_for("cache")
