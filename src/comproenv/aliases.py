# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Persisted user aliases.

User aliases live in global settings under ``alias_<state>`` as a flat,
space-separated list of ``new existing`` pairs, replayed left to right.
"""

from __future__ import annotations

import logging

from .registry import Scope
from .settings import SettingKind

logger = logging.getLogger(__name__)

AliasPair = tuple[str, str]  # (alias name, target name)


def alias_key(scope: Scope) -> str:
    return SettingKind.ALIAS.prefix + scope.state_name


def parse_pairs(value: str) -> list[AliasPair]:
    tokens = value.split()
    if len(tokens) % 2:
        logger.warning("Dropping unpaired alias token: %s", tokens[-1])
        tokens = tokens[:-1]
    return [(tokens[i], tokens[i + 1]) for i in range(0, len(tokens), 2)]


def format_pairs(pairs: list[AliasPair]) -> str:
    return " ".join(f"{new} {target}" for new, target in pairs)


def remove_alias_chain(
    pairs: list[AliasPair], name: str
) -> tuple[list[AliasPair], list[AliasPair]]:
    """Drop ``name`` and everything aliased to it, transitively.

    A pair goes when its alias name or its target is a dead name; every alias
    name dropped that way becomes dead too. Names are visited once, so
    self-aliases and cycles terminate.

    Returns:
        (remaining pairs in original order, removed pairs)
    """
    remaining = list(pairs)
    removed: list[AliasPair] = []
    pending = [name]
    visited: set[str] = set()

    while pending:
        dead = pending.pop()
        if dead in visited:
            continue
        visited.add(dead)

        keep: list[AliasPair] = []
        for new, target in remaining:
            if new == dead or target == dead:
                removed.append((new, target))
                pending.append(new)
            else:
                keep.append((new, target))
        remaining = keep

    return remaining, removed
