# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Task-state commands: build, run and test the selected task.

compiler_<lang> and runner_<lang> settings are command templates. They run in
the task directory with these placeholders (values are shell-quoted):

    {src}   source file, <task>.<lang>
    {bin}   compiled binary, <task>.exe
    {name}  task name
    {dir}   task directory
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import CommandError, SettingNotFound
from ..registry import CommandRegistry, Scope
from ..utils import substitute_placeholders
from .common import require_args

if TYPE_CHECKING:
    from ..shell import Shell  # pragma: no cover

logger = logging.getLogger(__name__)


def _task_context(shell: Shell) -> tuple[str, str, str]:
    """(env name, task name, language) of the selected task."""
    env, task = shell.env, shell.task
    if env is None or task is None:
        raise CommandError("No task selected")
    language = task.language
    if not language:
        try:
            language = shell.resolve("language")
        except SettingNotFound:
            raise CommandError(f"Task {task.name} has no language") from None
    return env.name, task.name, language


def _placeholders(shell: Shell, env: str, task: str, lang: str) -> dict:
    return {
        "src": f"{task}.{lang}",
        "bin": f"{task}.exe",
        "name": task,
        "dir": str(shell.workspace.task_path(env, task)),
    }


def _render(shell: Shell, template: str, values: dict[str, str]) -> str:
    try:
        return substitute_placeholders(template, values)
    except ValueError as e:
        raise CommandError(str(e)) from e


def build_run_command(shell: Shell) -> str:
    """Runner command for the selected task.

    Falls back to executing the compiled binary when only a compiler is
    configured for the language.
    """
    env, task, lang = _task_context(shell)
    values = _placeholders(shell, env, task, lang)
    try:
        template = shell.resolve(f"runner_{lang}")
    except SettingNotFound:
        try:
            shell.resolve(f"compiler_{lang}")
        except SettingNotFound:
            raise CommandError(
                f"No runner or compiler configured for {lang}"
            ) from None
        template = "./{bin}"
    return _render(shell, template, values)


def cmd_compile(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    env, task, lang = _task_context(shell)
    try:
        template = shell.resolve(f"compiler_{lang}")
    except SettingNotFound:
        raise CommandError(f"No compiler configured for {lang}") from None
    command = _render(shell, template, _placeholders(shell, env, task, lang))
    shell.write(command)
    cwd = str(shell.workspace.task_path(env, task))
    return shell.executor.run_tty(command, cwd=cwd).exit_code


def cmd_run(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    env, task, _lang = _task_context(shell)
    command = build_run_command(shell)
    cwd = str(shell.workspace.task_path(env, task))
    return shell.executor.run_tty(command, cwd=cwd).exit_code


def _read_test_file(path: Path) -> str:
    """Test file text; a missing file reads as empty."""
    if not path.exists():
        return ""
    return path.read_text(encoding="utf-8", errors="replace")


def cmd_test(shell: Shell, argv: list[str]) -> int:
    """Run against every tests/<name>.in; verdict = number of failures."""
    require_args(argv, 0)
    env, task, _lang = _task_context(shell)
    command = build_run_command(shell)
    cwd = str(shell.workspace.task_path(env, task))
    tests_dir = shell.workspace.tests_path(env, task)

    tests = shell.workspace.list_tests(env, task)
    if not tests:
        shell.write("No tests found")
        return 0

    failures = 0
    for test in tests:
        input_text = _read_test_file(tests_dir / f"{test}.in")
        expected = _read_test_file(tests_dir / f"{test}.out")
        exit_code, stdout, stderr, _started, duration_ms = shell.executor.run(
            command, cwd=cwd, input_text=input_text
        )
        if exit_code != 0:
            verdict = "RE"
        elif stdout.split() == expected.split():
            verdict = "OK"
        else:
            verdict = "WA"
        if verdict != "OK":
            failures += 1
            logger.debug("test %s: %s\n%s", test, verdict, stderr)
        shell.write(f"Test {test}: {verdict} ({duration_ms} ms)")

    shell.write(f"Passed {len(tests) - failures}/{len(tests)}")
    return failures


def cmd_generator(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.enter_generator()
    return 0


def cmd_leave_task(shell: Shell, argv: list[str]) -> int:
    require_args(argv, 0)
    shell.enter_environment(shell.current_env)
    return 0


def register(registry: CommandRegistry) -> None:
    t = Scope.TASK
    registry.register(t, "c", "Compile task", cmd_compile)
    registry.alias(t, "c", t, "compile")
    registry.register(t, "r", "Run task", cmd_run)
    registry.alias(t, "r", t, "run")
    registry.register(t, "t", "Test task on its tests", cmd_test)
    registry.alias(t, "t", t, "test")
    registry.register(t, "gen", "Enter tests generator", cmd_generator)
    registry.register(t, "q", "Exit from task", cmd_leave_task)
