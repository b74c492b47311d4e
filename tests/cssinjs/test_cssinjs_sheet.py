"""
Unit tests for cssinjs.sheet.

These tests cover:
- InsertionGate at-most-once writes and failure handling
- StyleSheet rendering
- document activation per context and the process-wide default
- missing document errors
"""

from __future__ import annotations

import re
import threading

import pytest

from cssinjs.compile import CompiledRule
from cssinjs.errors import CssInJsError, ErrorCode
from cssinjs.sheet import (
    Document,
    InsertionGate,
    StyleSheet,
    current_document,
    insert_rule,
    set_default_document,
    use_document,
)

RULE = CompiledRule(identifier="f6e2hlp", css_text=".f6e2hlp{color:white}")


def test_gate_writes_each_identifier_once() -> None:
    """Test a second insert of the same identifier is a no-op."""
    written: list[str] = []
    gate = InsertionGate(written.append)

    assert gate.insert(RULE) == "f6e2hlp"
    assert gate.insert(RULE) == "f6e2hlp"
    assert written == [".f6e2hlp{color:white}"]
    assert "f6e2hlp" in gate
    assert len(gate) == 1


def test_gate_accepts_pairs() -> None:
    """Test plain `(identifier, css_text)` tuples are accepted."""
    written: list[str] = []
    gate = InsertionGate(written.append)

    gate.insert(("a", "a{}"))
    gate.insert(("b", "b{}"))
    gate.insert(("a", "a{}"))
    assert written == ["a{}", "b{}"]


def test_gate_keys_on_identifier_and_css() -> None:
    """Test one identifier with different CSS texts writes each text once."""
    written: list[str] = []
    gate = InsertionGate(written.append)

    gate.insert(("f1", "p{margin:0}"))
    gate.insert(("f1", ".f1 p{margin:0}"))
    gate.insert(("f1", "p{margin:0}"))

    assert written == ["p{margin:0}", ".f1 p{margin:0}"]
    assert "f1" in gate
    assert ("f1", ".f1 p{margin:0}") in gate
    assert ("f1", "other") not in gate
    assert len(gate) == 2


def test_gate_does_not_record_failed_writes() -> None:
    """Test a failing write propagates and a later retry writes."""
    written: list[str] = []
    failures = [OSError("sheet detached")]

    def write(css_text: str) -> None:
        if failures:
            raise failures.pop()
        written.append(css_text)

    gate = InsertionGate(write)
    with pytest.raises(OSError, match="sheet detached"):
        gate.insert(RULE)

    assert "f6e2hlp" not in gate
    gate.insert(RULE)
    assert written == [RULE.css_text]


def test_gate_is_thread_safe() -> None:
    """Test concurrent inserts of one identifier write once."""
    written: list[str] = []
    gate = InsertionGate(written.append)
    threads = [threading.Thread(target=gate.insert, args=(RULE,)) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert written == [RULE.css_text]


def test_stylesheet_accumulates_in_order() -> None:
    """Test the sheet keeps insertion order."""
    sheet = StyleSheet()
    sheet.insert("a{}")
    sheet.insert("b{}")

    assert sheet.rules == ("a{}", "b{}")
    assert sheet.css_text == "a{}b{}"
    assert len(sheet) == 2


def test_stylesheet_render() -> None:
    """Test rendering as a style element."""
    sheet = StyleSheet()
    assert sheet.render() == ""

    sheet.insert('.x::after{content:"</style>"}')
    assert sheet.render(nonce='a"b') == (
        '<style nonce="a&quot;b">.x::after{content:"<\\/style>"}</style>'
    )


def test_document_shares_an_empty_sheet() -> None:
    """Test a supplied empty sheet is used, not replaced."""
    sheet = StyleSheet()
    doc = Document(sheet)
    doc.insert(RULE)

    assert doc.sheet is sheet
    assert sheet.rules == (RULE.css_text,)


def test_missing_document_raises() -> None:
    """Test inserting without a document fails loudly."""
    with pytest.raises(
        RuntimeError, match=re.escape("No active document to insert CSS into.")
    ) as exc:
        insert_rule(RULE)

    assert isinstance(exc.value.__cause__, CssInJsError)
    assert exc.value.__cause__.code == ErrorCode.MISSING_DOCUMENT


def test_use_document_scopes_the_active_document() -> None:
    """Test the context manager activates and restores documents."""
    outer = Document()
    with use_document(outer) as doc:
        assert doc is outer
        assert current_document() is outer
        with use_document() as inner:
            assert inner is not outer
            insert_rule(RULE)
        assert current_document() is outer

    assert inner.sheet.rules == (RULE.css_text,)
    assert len(outer.sheet) == 0
    with pytest.raises(RuntimeError):
        current_document()


def test_default_document_is_a_fallback() -> None:
    """Test the process-wide default is used only without an active one."""
    default = Document()
    set_default_document(default)
    assert current_document() is default

    with use_document() as active:
        assert current_document() is active

    set_default_document(None)
    with pytest.raises(RuntimeError):
        current_document()


def test_documents_do_not_share_inserted_sets() -> None:
    """Test each page context inserts its own copy of a rule."""
    with use_document() as first:
        insert_rule(RULE)
    with use_document() as second:
        insert_rule(RULE)

    assert first.sheet.rules == second.sheet.rules == (RULE.css_text,)
