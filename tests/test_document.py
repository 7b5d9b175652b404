# tests/test_document.py
"""
Document model adapter over PyYAML.
Scalars must stay strings; shape errors are DocumentParseError.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from comproenv.document import (
    QuotedStr,
    Value,
    dump_document,
    dump_text,
    load_document,
    parse_text,
)
from comproenv.errors import DocumentParseError

# ----------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------


def test_scalars_stay_strings():
    doc = parse_text("global:\n  autosave: on\n  count: 10\n  flag: yes\n")
    body = doc.get_value("global").get_mapping()

    assert body.get_value("autosave").get_string() == "on"
    assert body.get_value("count").get_string() == "10"
    assert body.get_value("flag").get_string() == "yes"


def test_mapping_preserves_key_order():
    doc = parse_text("b: 1\na: 2\nc: 3\n")

    assert doc.keys() == ["b", "a", "c"]
    assert [k for k, _ in doc.items()] == ["b", "a", "c"]
    assert len(doc) == 3


def test_empty_text_is_empty_mapping():
    assert len(parse_text("")) == 0
    assert len(parse_text("# only a comment\n")) == 0


def test_malformed_text_raises():
    with pytest.raises(DocumentParseError):
        parse_text("global: [unclosed\n")


def test_top_level_must_be_mapping():
    with pytest.raises(DocumentParseError):
        parse_text("- a\n- b\n")


def test_missing_key_raises():
    doc = parse_text("a: 1\n")

    assert doc.has_key("a")
    assert not doc.has_key("b")
    with pytest.raises(DocumentParseError):
        doc.get_value("b")


# ----------------------------------------------------------------
# Value accessors
# ----------------------------------------------------------------


def test_value_type_mismatch_raises():
    with pytest.raises(DocumentParseError):
        Value(["a"]).get_string()
    with pytest.raises(DocumentParseError):
        Value("a").get_sequence()
    with pytest.raises(DocumentParseError):
        Value("a").get_mapping()


def test_empty_value_reads_as_empty_container():
    assert Value(None).get_sequence() == []
    assert len(Value(None).get_mapping()) == 0
    assert Value(None).get_string() == ""


def test_value_kind_predicates():
    assert Value("x").is_scalar()
    assert Value([]).is_sequence()
    assert Value({}).is_mapping()


# ----------------------------------------------------------------
# Emitting
# ----------------------------------------------------------------


def test_quoted_str_is_double_quoted():
    text = dump_text({"history": [QuotedStr("set x y"), QuotedStr("q")]})

    assert '- "set x y"' in text
    assert '- "q"' in text


def test_dump_keeps_insertion_order():
    text = dump_text({"z": "1", "a": "2"})

    assert text.index("z:") < text.index("a:")


def test_dump_and_load_document(tmp_path: Path):
    path = tmp_path / "nested" / "doc.yaml"
    dump_document({"global": {"autosave": "on"}}, path)

    doc = load_document(path)
    assert (
        doc.get_value("global").get_mapping().get_value("autosave").get_string()
        == "on"
    )


def test_load_missing_document_raises_file_not_found(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_document(tmp_path / "missing.yaml")
