# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""Argument checks shared by command handlers."""

from __future__ import annotations

import os

from ..errors import CommandError

_SEPARATORS = {"/", "\\", os.sep} | ({os.altsep} if os.altsep else set())


def require_args(argv: list[str], count: int) -> None:
    """Exactly ``count`` arguments after the command name."""
    if len(argv) != count + 1:
        raise CommandError(f"Incorrect arguments for command {argv[0]}")


def require_range(argv: list[str], low: int, high: int | None = None) -> None:
    """Between ``low`` and ``high`` arguments (no upper bound when None)."""
    n = len(argv) - 1
    if n < low or (high is not None and n > high):
        raise CommandError(f"Incorrect arguments for command {argv[0]}")


def removal_verdict(shell, what: str, name: str, removed: bool, path) -> int:
    """Report a removal whose directory may have survived."""
    if removed:
        return 0
    shell.write(f"{what} {name} removed, but its directory {path} persisted")
    return 1


def require_plain_name(what: str, name: str) -> None:
    """Names become single path components under the workspace."""
    if name in (".", "..") or any(sep in name for sep in _SEPARATORS):
        raise CommandError(f"Incorrect {what} name: {name}")
