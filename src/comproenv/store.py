# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
YAML-backed persistence for comproenv.

Two physical documents, split the same way every time:

- config document: ``global`` settings plus ``commands_history``
- environments document: ``environments`` sequence with nested ``tasks``

The builders and parsers here are pure; YAMLStore only adds file I/O.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .document import Mapping, QuotedStr, dump_document, load_document
from .errors import DocumentParseError
from .history import HistoryBuffer
from .models import Environment, Task
from .settings import (
    HISTORY_KEY,
    Settings,
    settings_from_document,
    settings_to_document,
)

logger = logging.getLogger(__name__)

GLOBAL_KEY = "global"
ENVIRONMENTS_KEY = "environments"


# ----------------------------------------------------------------
# Document builders
# ----------------------------------------------------------------


def build_config_document(
    global_settings: Settings, history: HistoryBuffer
) -> dict[str, Any]:
    body = settings_to_document(global_settings)
    entries = history.get_all()
    if entries:
        body[HISTORY_KEY] = [QuotedStr(line) for line in entries]
    return {GLOBAL_KEY: body}


def _entity_document(name: str, settings: Settings) -> dict[str, Any]:
    doc: dict[str, Any] = {"name": name}
    doc.update(settings_to_document(settings))
    return doc


def build_environments_document(envs: list[Environment]) -> dict[str, Any]:
    items = []
    for env in envs:
        doc = _entity_document(env.name, env.settings)
        if env.tasks:
            doc["tasks"] = [
                _entity_document(task.name, task.settings)
                for task in env.tasks
            ]
        items.append(doc)
    return {ENVIRONMENTS_KEY: items}


# ----------------------------------------------------------------
# Document parsers
# ----------------------------------------------------------------


def parse_config_document(
    config: Mapping, history: HistoryBuffer
) -> Settings:
    """Global settings from the config document; history is replayed."""
    if not config.has_key(GLOBAL_KEY):
        return Settings()
    body = config.get_value(GLOBAL_KEY).get_mapping()
    if body.has_key(HISTORY_KEY):
        for line in body.get_value(HISTORY_KEY).get_sequence():
            history.push(line.get_string())
    return settings_from_document(body)


def _entity_name(mapping: Mapping, what: str) -> str:
    if not mapping.has_key("name"):
        raise DocumentParseError(f"{what} entry without a name")
    name = mapping.get_value("name").get_string()
    if not name:
        raise DocumentParseError(f"{what} entry with an empty name")
    return name


def parse_environments_document(doc: Mapping) -> list[Environment]:
    if not doc.has_key(ENVIRONMENTS_KEY):
        return []
    envs: list[Environment] = []
    for env_value in doc.get_value(ENVIRONMENTS_KEY).get_sequence():
        env_map = env_value.get_mapping()
        env = Environment(
            _entity_name(env_map, "Environment"),
            settings_from_document(env_map),
        )
        if env_map.has_key("tasks"):
            for task_value in env_map.get_value("tasks").get_sequence():
                task_map = task_value.get_mapping()
                env.add_task(
                    Task(
                        _entity_name(task_map, "Task"),
                        settings_from_document(task_map),
                    )
                )
        logger.debug("env: %s (%d tasks)", env.name, len(env.tasks))
        envs.append(env)
    return envs


# ----------------------------------------------------------------
# File-backed store
# ----------------------------------------------------------------


class YAMLStore:
    """Reads and writes the config and environments documents."""

    def __init__(self, config_path: Path, environments_path: Path):
        self.config_path = Path(config_path)
        self.environments_path = Path(environments_path)

    def read_config(self) -> Mapping:
        """Raises FileNotFoundError / DocumentParseError."""
        return load_document(self.config_path)

    def read_environments(self) -> Mapping:
        """Raises FileNotFoundError / DocumentParseError."""
        return load_document(self.environments_path)

    def save(
        self,
        global_settings: Settings,
        history: HistoryBuffer,
        envs: list[Environment],
    ) -> None:
        """Write both documents. OSError propagates to the caller."""
        dump_document(
            build_config_document(global_settings, history),
            self.config_path,
        )
        dump_document(
            build_environments_document(envs), self.environments_path
        )
        logger.debug(
            "saved %s and %s", self.config_path, self.environments_path
        )
