# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Entity model: environments and the tasks they hold."""

from __future__ import annotations

from dataclasses import dataclass, field

from .settings import Settings


@dataclass
class Task:
    name: str
    settings: Settings = field(default_factory=Settings)

    @property
    def language(self) -> str:
        return self.settings.get("language", "")


@dataclass
class Environment:
    name: str
    settings: Settings = field(default_factory=Settings)
    tasks: list[Task] = field(default_factory=list)

    def find_task(self, name: str) -> int:
        """Index of the task named ``name``, or -1."""
        for i, task in enumerate(self.tasks):
            if task.name == name:
                return i
        return -1

    def add_task(self, task: Task) -> None:
        self.tasks.append(task)


def find_environment(envs: list[Environment], name: str) -> int:
    """Index of the environment named ``name`` (case-sensitive), or -1."""
    for i, env in enumerate(envs):
        if env.name == name:
            return i
    return -1
