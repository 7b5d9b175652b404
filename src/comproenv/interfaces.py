# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Protocol definitions for dependency injection.

These interfaces keep the shell engine independent of the process
boundary and of the packaged configuration, so both can be faked in tests.
"""

from __future__ import annotations

from typing import Any, Protocol


class Executor(Protocol):
    """Protocol for command execution."""

    def run(
        self,
        command: str,
        cwd: str | None = None,
        input_text: str | None = None,
    ) -> tuple[int, str, str, str, int]:
        """Run a shell command and capture its output.

        Returns:
            (exit_code, stdout, stderr, started_at, duration_ms)
        """
        ...

    def run_tty(self, command: str, cwd: str | None = None) -> Any:
        """Run a command attached to the terminal; result has .exit_code."""
        ...


class ConfigModel(Protocol):
    """Protocol for packaged configuration access."""

    @property
    def system(self) -> dict[str, Any]:
        ...

    @property
    def branding(self) -> dict[str, str]:
        ...

    @property
    def history_capacity(self) -> int:
        ...

    @property
    def prompt_marker(self) -> str:
        ...

    def default_settings(self, scope_name: str) -> dict[str, str]:
        ...

    def get_path(self, path: str, default: Any = None) -> Any:
        ...
