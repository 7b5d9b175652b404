# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Generator-state commands: manage the selected task's test files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import CommandError
from ..registry import CommandRegistry, Scope
from .common import require_args, require_plain_name

if TYPE_CHECKING:
    from ..shell import Shell  # pragma: no cover


def _names(shell: Shell) -> tuple[str, str]:
    env, task = shell.env, shell.task
    if env is None or task is None:
        raise CommandError("No task selected")
    return env.name, task.name


def cmd_list_tests(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    env, task = _names(shell)
    lines = [f"List of tests in {task}:"]
    lines.extend(f"|-> {test}" for test in shell.workspace.list_tests(env, task))
    shell.write("\n".join(lines))
    return 0


def cmd_create_test(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    env, task = _names(shell)
    require_plain_name("test", argv[1])
    if argv[1] in shell.workspace.list_tests(env, task):
        raise CommandError(f"Test named {argv[1]} already exists")
    return 0 if shell.workspace.create_test(env, task, argv[1]) else 1


def cmd_remove_test(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 1)
    env, task = _names(shell)
    if argv[1] not in shell.workspace.list_tests(env, task):
        raise CommandError("Incorrect test name")
    return 0 if shell.workspace.remove_test(env, task, argv[1]) else 1


def cmd_leave_generator(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.enter_task(shell.current_task)
    return 0


def register(registry: CommandRegistry) -> None:
    g = Scope.GENERATOR
    registry.register(g, "lt", "List of tests", cmd_list_tests)
    registry.register(g, "ct", "Create test", cmd_create_test)
    registry.register(g, "rt", "Remove test", cmd_remove_test)
    registry.register(g, "q", "Exit from generator", cmd_leave_generator)
