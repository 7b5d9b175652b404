# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Subprocess-backed executor implementation for comproenv.

This module provides:
- run(): buffered execution with optional stdin text (task tests,
  interpreter version check)
- run_tty(): the child inherits the terminal (compilers, solutions,
  interactive interpreters); the shell blocks until it exits

Both calls are blocking. Exit status is the whole contract.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TTYResult:
    """Result from TTY/passthrough execution (no output capture)."""

    exit_code: int
    started_at: str
    duration_ms: int


class SubprocessExecutor:
    """Subprocess implementation of Executor protocol."""

    def __init__(self, force_color: bool = False, timeout: int | None = 30):
        """Initialize executor with configuration.

        Args:
            force_color: If True, set color-forcing env variables
            timeout: Timeout in seconds for captured runs (None: no limit)
        """
        self.force_color = force_color
        self.timeout = timeout

    def _build_env(self) -> dict:
        env = os.environ.copy()
        if self.force_color:
            env["PY_COLORS"] = "1"
            env["FORCE_COLOR"] = "1"
            env["CLICOLOR_FORCE"] = "1"
        return env

    def run(
        self,
        command: str,
        cwd: str | None = None,
        input_text: str | None = None,
    ) -> tuple[int, str, str, str, int]:
        """Run a shell command and return buffered results.

        Args:
            command: shell command to execute
            cwd: working directory for the command (default: current directory)
            input_text: text fed to the child's stdin

        Returns:
            (exit_code, stdout, stderr, started_at, duration_ms)
        """
        env = self._build_env()

        started_at = datetime.now().isoformat()
        start_time = time.time()
        logger.debug("run: %s (cwd=%s)", command, cwd)

        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                input=input_text,
                timeout=self.timeout,
                env=env,
                cwd=cwd,
            )
            duration_ms = int((time.time() - start_time) * 1000)
            return (
                result.returncode, result.stdout, result.stderr,
                started_at, duration_ms
            )
        except subprocess.TimeoutExpired:
            duration_ms = int((time.time() - start_time) * 1000)
            return (
                1, "",
                f"Command timed out after {self.timeout} seconds",
                started_at, duration_ms
            )
        except OSError as e:
            duration_ms = int((time.time() - start_time) * 1000)
            return (
                1, "", f"Error executing command: {e}",
                started_at, duration_ms
            )

    def run_tty(self, command: str, cwd: str | None = None) -> TTYResult:
        """Run a command with full terminal control (no output capture).

        The command inherits stdin/stdout/stderr from the parent process and
        the call blocks until it exits.
        """
        env = self._build_env()
        started_at = datetime.now().isoformat()
        start_ts = time.time()
        logger.debug("run_tty: %s (cwd=%s)", command, cwd)

        try:
            proc = subprocess.Popen(
                command,
                shell=True,
                stdin=None,  # inherit from parent
                stdout=None,  # inherit from parent
                stderr=None,  # inherit from parent
                env=env,
                cwd=cwd,
            )
            exit_code = proc.wait()
        except OSError as e:
            logger.error("Failed to start %r: %s", command, e)
            exit_code = 1

        duration_ms = int((time.time() - start_ts) * 1000)
        return TTYResult(
            exit_code=exit_code,
            started_at=started_at,
            duration_ms=duration_ms,
        )
