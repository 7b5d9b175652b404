# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Per-scope command tables with alias indirection.

Each Scope owns a ``name -> handler`` table. Aliases bind a new name to the
handler currently bound to an existing name (possibly in another scope).
Help metadata groups every name sharing a description, so an alias shows up
next to the command it points at.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from .errors import AliasError

if TYPE_CHECKING:
    from .shell import Shell  # pragma: no cover

Handler = Callable[["Shell", list[str]], int]


class Scope(Enum):
    GLOBAL = "global"
    ENVIRONMENT = "environment"
    TASK = "task"
    GENERATOR = "generator"

    @property
    def state_name(self) -> str:
        return self.value


class CommandRegistry:
    """Command tables indexed by Scope."""

    def __init__(self) -> None:
        self._tables: dict[Scope, dict[str, Handler]] = {
            scope: {} for scope in Scope
        }
        self._help: dict[Scope, dict[str, set[str]]] = {
            scope: {} for scope in Scope
        }

    def clear(self) -> None:
        for scope in Scope:
            self._tables[scope].clear()
            self._help[scope].clear()

    # -----------------------
    # Registration
    # -----------------------

    def register(
        self, scope: Scope, name: str, description: str, handler: Handler
    ) -> None:
        """Bind ``name`` in ``scope``. An existing binding is overwritten."""
        self._tables[scope][name] = handler
        self._add_help(scope, description, name)

    def alias(
        self, scope: Scope, target: str, alias_scope: Scope, alias_name: str
    ) -> None:
        """Bind ``alias_name`` in ``alias_scope`` to ``target``'s handler."""
        handler = self._tables[scope].get(target)
        if handler is None:
            raise AliasError(target, scope.state_name)
        self._tables[alias_scope][alias_name] = handler
        description = self.description_of(scope, target)
        if description is not None:
            self._add_help(alias_scope, description, alias_name)

    def _add_help(self, scope: Scope, description: str, name: str) -> None:
        groups = self._help[scope]
        for desc in list(groups):
            if name in groups[desc] and desc != description:
                groups[desc].discard(name)
                if not groups[desc]:
                    del groups[desc]
        groups.setdefault(description, set()).add(name)

    # -----------------------
    # Lookup
    # -----------------------

    def lookup(self, scope: Scope, name: str) -> Handler | None:
        return self._tables[scope].get(name)

    def has(self, scope: Scope, name: str) -> bool:
        return name in self._tables[scope]

    def names(self, scope: Scope) -> list[str]:
        return sorted(self._tables[scope])

    def description_of(self, scope: Scope, name: str) -> str | None:
        for desc, names in self._help[scope].items():
            if name in names:
                return desc
        return None

    def help_groups(self, scope: Scope) -> list[tuple[str, list[str]]]:
        """(description, sorted names) rows ordered by description."""
        return [
            (desc, sorted(names))
            for desc, names in sorted(self._help[scope].items())
        ]
