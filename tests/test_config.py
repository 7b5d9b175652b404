# tests/test_config.py
from __future__ import annotations

from pathlib import Path

import pytest

from comproenv import config


def test_packaged_system_config_loads():
    cfg = config.load_system_config()

    assert cfg.prompt_marker == ">"
    assert cfg.history_capacity == 100
    assert cfg.documents["config"] == "config.yaml"
    assert cfg.get_path("workspace.env_prefix") == "env_"
    assert cfg.default_settings("global") == {
        "autosave": "on",
        "python_interpreter": "python",
    }
    assert cfg.branding["marker_color"] in config.ANSI_COLORS


def test_get_path_missing_returns_default():
    cfg = config.YAMLConfig({"a": {"b": 1}})

    assert cfg.get_path("a.b") == 1
    assert cfg.get_path("a.c", "x") == "x"
    assert cfg.get_path("a.b.c", "x") == "x"
    assert cfg.get_path("", "x") == "x"
    assert cfg.default_settings("task") == {}


def test_missing_defaults_file():
    with pytest.raises(FileNotFoundError):
        config.load_defaults_yaml("nope.yaml")


def test_data_root_from_environment(data_home: Path):
    assert config.get_data_root() == data_home
    assert data_home.is_dir()
    assert config.logs_dir(data_home) == data_home / "comproenv" / "logs"


def test_data_root_default(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.delenv("COMPROENV_DATA_HOME")
    monkeypatch.setattr(Path, "home", lambda: tmp_path)

    assert config.get_data_root() == tmp_path / ".local" / "share"
