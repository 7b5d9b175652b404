# comproenv: Interactive Environment Shell for Practice Tasks
# Copyright (c) 2025
# TriFactoria (Andrew Blankfield)
#
# Licensed under the Business Source License 1.1 (BSL 1.1).
# You may use, modify, and redistribute this file under the terms of the BSL.
# On the Change Date (2029-01-01), this file will be licensed under
# the Apache License, Version 2.0.

"""
Document Model adapter.

PyYAML owns tokenizing and parsing. This module wraps its output in a small
polymorphic value tree (scalar string / sequence / mapping) with the
``has_key`` / ``get_value`` contract the settings layer consumes.

Documents are loaded with ``yaml.BaseLoader`` so every scalar stays a string:
``autosave: on`` must come back as ``"on"``, not ``True``.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import yaml

from .errors import DocumentParseError


class Value:
    """A node of the parsed document."""

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    @property
    def raw(self) -> Any:
        return self._raw

    def is_scalar(self) -> bool:
        return self._raw is None or isinstance(self._raw, str)

    def is_sequence(self) -> bool:
        return isinstance(self._raw, list)

    def is_mapping(self) -> bool:
        return isinstance(self._raw, dict)

    def get_string(self) -> str:
        if self._raw is None:
            return ""
        if not isinstance(self._raw, str):
            raise DocumentParseError(
                f"Expected scalar, got {type(self._raw).__name__}"
            )
        return self._raw

    def get_sequence(self) -> list[Value]:
        if self._raw is None or self._raw == "":
            return []
        if not isinstance(self._raw, list):
            raise DocumentParseError(
                f"Expected sequence, got {type(self._raw).__name__}"
            )
        return [Value(item) for item in self._raw]

    def get_mapping(self) -> Mapping:
        if self._raw is None or self._raw == "":
            return Mapping({})
        if not isinstance(self._raw, dict):
            raise DocumentParseError(
                f"Expected mapping, got {type(self._raw).__name__}"
            )
        return Mapping(self._raw)


class Mapping:
    """Ordered mapping node: string keys to Value."""

    def __init__(self, raw: dict[str, Any]) -> None:
        self._raw = raw

    def has_key(self, name: str) -> bool:
        return name in self._raw

    def get_value(self, name: str) -> Value:
        if name not in self._raw:
            raise DocumentParseError(f"Missing key: {name}")
        return Value(self._raw[name])

    def keys(self) -> list[str]:
        return [str(k) for k in self._raw]

    def items(self) -> Iterator[tuple[str, Value]]:
        for key, raw in self._raw.items():
            yield str(key), Value(raw)

    def __len__(self) -> int:
        return len(self._raw)


# -----------------------
# Parsing
# -----------------------


def parse_text(text: str) -> Mapping:
    """Parse YAML text into a top-level Mapping.

    Empty text is an empty mapping. Anything other than a mapping at the top
    level is malformed.
    """
    try:
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise DocumentParseError(f"Malformed document: {e}") from e

    if data is None or data == "":
        return Mapping({})
    if not isinstance(data, dict):
        raise DocumentParseError(
            "Top-level document must be a mapping"
        )
    return Mapping(data)


def load_document(path: Path) -> Mapping:
    """Read and parse a document file.

    Raises FileNotFoundError when the file is missing (callers decide whether
    that is an error) and DocumentParseError when it is malformed.
    """
    text = path.read_text(encoding="utf-8")
    return parse_text(text)


# -----------------------
# Emitting
# -----------------------


class QuotedStr(str):
    """String that is always emitted double-quoted."""


class _DocumentDumper(yaml.SafeDumper):
    pass


def _represent_quoted(dumper: yaml.SafeDumper, data: QuotedStr):
    return dumper.represent_scalar(
        "tag:yaml.org,2002:str", str(data), style='"'
    )


_DocumentDumper.add_representer(QuotedStr, _represent_quoted)


def dump_text(data: dict[str, Any]) -> str:
    return yaml.dump(
        data,
        Dumper=_DocumentDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def dump_document(data: dict[str, Any], path: Path) -> None:
    """Write a document, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(dump_text(data))
