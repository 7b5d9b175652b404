# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Error taxonomy for comproenv.

- CommandError: bad arguments or unknown/duplicate/missing entities.
  Caught by the dispatch loop, printed, session continues.
- AliasError: alias target is not registered (no forward references).
- SettingNotFound: no settings layer defines the requested key.
- DocumentParseError: persisted document is malformed or has the wrong shape.
"""

from __future__ import annotations


class ComproenvError(Exception):
    """Base class for all comproenv errors."""


class CommandError(ComproenvError):
    """A command handler rejected its input."""


class AliasError(CommandError):
    """Alias target is not registered in the source scope."""

    def __init__(self, target: str, scope_name: str = "") -> None:
        where = f" in state {scope_name}" if scope_name else ""
        super().__init__(f"Unable to add alias for {target}{where}")
        self.target = target


class SettingNotFound(ComproenvError, LookupError):
    """Raised by settings resolution when no layer defines the key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"No setting with name: {key}")
        self.key = key


class DocumentParseError(ComproenvError, ValueError):
    """Persisted YAML could not be parsed into the expected shape."""
