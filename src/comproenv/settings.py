# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Settings Store and its document round trip.

A Settings object is an ordered ``str -> str`` mapping. Keys are partitioned
by exact prefix into compiler_/runner_/template_/alias_ namespaces; anything
else is plain. The namespace is classified once, when a key enters the store,
and kept alongside the value.

Document shape for one store::

    plain_key: value
    compilers:
      cpp: g++ -O2 {src} -o {bin}
    runners: {...}
    templates: {...}
    aliases: {...}
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableMapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .document import Mapping
from .errors import CommandError, DocumentParseError, SettingNotFound


class SettingKind(Enum):
    """Namespace of a settings key: (key prefix, document section)."""

    COMPILER = ("compiler_", "compilers")
    RUNNER = ("runner_", "runners")
    TEMPLATE = ("template_", "templates")
    ALIAS = ("alias_", "aliases")
    PLAIN = ("", "")

    @property
    def prefix(self) -> str:
        return self.value[0]

    @property
    def section(self) -> str:
        return self.value[1]


PREFIXED_KINDS: tuple[SettingKind, ...] = (
    SettingKind.COMPILER,
    SettingKind.RUNNER,
    SettingKind.TEMPLATE,
    SettingKind.ALIAS,
)

HISTORY_KEY = "commands_history"

# Keys the document format uses structurally; they can't be plain settings.
RESERVED_KEYS: frozenset[str] = frozenset(
    {"name", "tasks", HISTORY_KEY} | {k.section for k in PREFIXED_KINDS}
)


@dataclass(frozen=True)
class ClassifiedKey:
    key: str
    kind: SettingKind
    name: str  # key with its prefix stripped (== key for PLAIN)


def classify(key: str) -> ClassifiedKey:
    """Classify by exact prefix; a bare prefix with nothing after it is plain."""
    for kind in PREFIXED_KINDS:
        if key.startswith(kind.prefix) and len(key) > len(kind.prefix):
            return ClassifiedKey(key, kind, key[len(kind.prefix):])
    return ClassifiedKey(key, SettingKind.PLAIN, key)


def validate_key(key: str) -> None:
    if not key:
        raise CommandError("Setting name must not be empty")
    if key in RESERVED_KEYS:
        raise CommandError(f"Setting name '{key}' is reserved")


class Settings(MutableMapping[str, str]):
    """Ordered settings mapping owned by one Global/Environment/Task scope."""

    def __init__(self, initial: Iterable[tuple[str, str]] | None = None):
        self._values: dict[str, str] = {}
        self._meta: dict[str, ClassifiedKey] = {}
        for key, value in initial or ():
            self[key] = value

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __setitem__(self, key: str, value: str) -> None:
        validate_key(key)
        if key not in self._meta:
            self._meta[key] = classify(key)
        self._values[key] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._values[key]
        del self._meta[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Settings({self._values!r})"

    def classified(self, key: str) -> ClassifiedKey:
        return self._meta[key]

    def by_kind(self, kind: SettingKind) -> list[tuple[str, str]]:
        """(stripped name, value) pairs of one namespace, insertion order."""
        return [
            (meta.name, self._values[key])
            for key, meta in self._meta.items()
            if meta.kind is kind
        ]

    def copy(self) -> Settings:
        return Settings(self.items())


# -----------------------
# Round trip
# -----------------------


def settings_to_document(settings: Settings) -> dict[str, Any]:
    """Plain keys as siblings, prefixed namespaces lifted into sub-mappings."""
    out: dict[str, Any] = {}
    for name, value in settings.by_kind(SettingKind.PLAIN):
        out[name] = value
    for kind in PREFIXED_KINDS:
        entries = settings.by_kind(kind)
        if entries:
            out[kind.section] = dict(entries)
    return out


def settings_from_document(mapping: Mapping) -> Settings:
    """Inverse of settings_to_document.

    ``name``, ``tasks`` and ``commands_history`` belong to the enclosing
    entity and are skipped.
    """
    settings = Settings()
    sections = {kind.section: kind for kind in PREFIXED_KINDS}
    for key, value in mapping.items():
        kind = sections.get(key)
        if kind is not None:
            for name, item in value.get_mapping().items():
                if not name:
                    raise DocumentParseError(f"Empty name in {key}")
                settings[kind.prefix + name] = item.get_string()
        elif key in RESERVED_KEYS:
            continue
        elif not key:
            raise DocumentParseError("Empty setting name")
        else:
            settings[key] = value.get_string()
    return settings


# -----------------------
# Resolution
# -----------------------


def resolve(key: str, layers: Iterable[Settings | None]) -> str:
    """Return the value from the first (narrowest) layer defining ``key``."""
    for layer in layers:
        if layer is not None and key in layer:
            return layer[key]
    raise SettingNotFound(key)
