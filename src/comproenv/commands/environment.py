# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Environment-state commands: task management inside the selected env."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import CommandError, SettingNotFound
from ..models import Task
from ..registry import CommandRegistry, Scope
from .common import (
    removal_verdict,
    require_args,
    require_plain_name,
    require_range,
)

if TYPE_CHECKING:
    from ..shell import Shell  # pragma: no cover

logger = logging.getLogger(__name__)


def _selected_env(shell: Shell):
    env = shell.env
    if env is None:
        raise CommandError("No environment selected")
    return env


def _template_text(shell: Shell, language: str) -> str:
    """Contents of the file named by template_<language>, if any."""
    try:
        template = shell.resolve(f"template_{language}")
    except SettingNotFound:
        return ""
    path = Path(template).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning("Template %s unreadable: %s", path, e)
        shell.write(f"Warning: template {path} is not readable")
        return ""


def cmd_select_task(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    index = _selected_env(shell).find_task(argv[1])
    if index == -1:
        raise CommandError("Incorrect task name")
    shell.enter_task(index)
    return 0


def cmd_create_task(shell: Shell, argv: list[str]) -> int:
    """ct <task> [language]; language falls back to the `language` setting."""
    require_range(argv, 1, 2)
    env = _selected_env(shell)
    name = argv[1]
    require_plain_name("task", name)
    if env.find_task(name) != -1:
        raise CommandError(f"Task named {name} already exists")
    if len(argv) == 3:
        language = argv[2]
    else:
        try:
            language = shell.resolve("language")
        except SettingNotFound:
            raise CommandError(
                "No language given and no `language` setting found"
            ) from None
    require_plain_name("language", language)

    task = Task(name)
    task.settings["language"] = language
    env.add_task(task)

    created = shell.workspace.create_task(
        env.name, name, language, _template_text(shell, language)
    )
    save_verdict = shell.autosave()
    if not created:
        shell.write(f"Unable to create directory for task {name}")
        return 1
    return save_verdict


def cmd_remove_task(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    env = _selected_env(shell)
    name = argv[1]
    index = env.find_task(name)
    if index == -1:
        raise CommandError("Incorrect task name")
    del env.tasks[index]
    save_verdict = shell.autosave()
    removed = shell.workspace.remove_task(env.name, name)
    verdict = removal_verdict(
        shell, "Task", name, removed,
        shell.workspace.task_path(env.name, name),
    )
    return verdict or save_verdict


def cmd_list_tasks(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    env = _selected_env(shell)
    lines = [f"List of tasks in {env.name}:"]
    for task in env.tasks:
        lines.append(f"|-> {task.name}: {task.language}")
    shell.write("\n".join(lines))
    return 0


def cmd_leave_env(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.enter_global()
    return 0


def register(registry: CommandRegistry) -> None:
    e = Scope.ENVIRONMENT
    registry.register(e, "st", "Set task", cmd_select_task)
    registry.register(e, "ct", "Create task", cmd_create_task)
    registry.register(e, "rt", "Remove task", cmd_remove_task)
    registry.register(e, "lt", "List of tasks", cmd_list_tasks)
    registry.register(e, "q", "Exit from environment", cmd_leave_env)
