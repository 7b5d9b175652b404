# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Packaged defaults and data root resolution for comproenv.

Handles:
- Data root resolution (COMPROENV_DATA_HOME, ~/.local/share)
- Log directory helpers
- Packaged YAML defaults loading (comproenv.defaults/system.yaml)
- ANSI coloring constants used by the prompt
"""

from __future__ import annotations

import os
from importlib import resources as importlib_resources
from pathlib import Path
from typing import Any

import yaml

# -----------------------
# UI + branding constants
# -----------------------

ANSI_COLORS: dict[str, str] = {
    "cyan": "\033[38;5;69;1m",
    "pink": "\033[38;5;169;1m",
    "magenta": "\033[38;5;126;1m",
    "yellow": "\033[38;5;226;1m",
    "reset": "\033[0m",
    "dim": "\033[2m",
    "green": "\033[32m",
    "red": "\033[31m",
}


# -----------------------
# Config model wrapper
# -----------------------


class YAMLConfig:
    """Read-only view over the packaged system.yaml."""

    def __init__(self, config_dict: dict[str, Any]):
        self._config = config_dict

    @property
    def system(self) -> dict[str, Any]:
        return self._config.get("system", {}) or {}

    @property
    def branding(self) -> dict[str, str]:
        return self._config.get("branding", {}) or {}

    @property
    def workspace(self) -> dict[str, Any]:
        return self._config.get("workspace", {}) or {}

    @property
    def documents(self) -> dict[str, str]:
        return self._config.get("documents", {}) or {}

    @property
    def history_capacity(self) -> int:
        return int(self.get_path("history.capacity", 100))

    @property
    def prompt_marker(self) -> str:
        return str(self.system.get("prompt_marker", ">"))

    def default_settings(self, scope_name: str) -> dict[str, str]:
        raw = self.get_path(f"defaults.{scope_name}", {}) or {}
        return {str(k): str(v) for k, v in raw.items()}

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def get_path(self, path: str, default: Any = None) -> Any:
        """
        Nested lookup using dot-separated path.
        Example: get_path("workspace.env_prefix", "env_")
        """
        if not path:
            return default

        cur: Any = self._config
        for part in path.split("."):
            if not isinstance(cur, dict):
                return default
            if part not in cur:
                return default
            cur = cur[part]
        return cur


# -----------------------
# Data root + log helpers
# -----------------------


def get_data_root() -> Path:
    """Get the data root directory for comproenv.

    Resolution order:
    1. COMPROENV_DATA_HOME environment variable (if set)
    2. ~/.local/share
    """
    data_home = os.getenv("COMPROENV_DATA_HOME")
    if data_home:
        root = Path(data_home)
    else:
        root = Path.home() / ".local" / "share"

    root.mkdir(parents=True, exist_ok=True)
    return root


def logs_dir(data_root: Path) -> Path:
    """<data_root>/comproenv/logs"""
    return data_root / "comproenv" / "logs"


# -----------------------
# Packaged defaults loading
# -----------------------


def _defaults_dir() -> Path:
    """Return the installed path to the packaged defaults directory."""
    return Path(
        importlib_resources.files("comproenv.defaults")
    )  # type: ignore[arg-type]


def load_defaults_yaml(filename: str) -> dict[str, Any]:
    """
    Load a YAML file from comproenv/defaults/.
    """
    defaults_dir = _defaults_dir()
    path = defaults_dir / filename
    if not path.exists():
        raise FileNotFoundError(
            f"Missing defaults YAML: {filename} "
            f"(looked in {defaults_dir})"
        )

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(
            f"Defaults YAML {filename} must load to a mapping/dict."
        )
    return data


def load_system_config() -> YAMLConfig:
    """
    Load system.yaml from packaged defaults and return a YAMLConfig wrapper.
    """
    return YAMLConfig(load_defaults_yaml("system.yaml"))
