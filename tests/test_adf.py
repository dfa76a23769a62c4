"""Tests for ADF plain-text extraction."""

import logging

import pytest

from changethor.adf import extract_plain_text
from changethor.models import DocNode


def _doc(*content: dict) -> DocNode:
    return DocNode.model_validate({"type": "doc", "version": 1, "content": list(content)})


def _para(*texts: str) -> dict:
    return {"type": "paragraph", "content": [{"type": "text", "text": t} for t in texts]}


class TestPassthrough:
    def test_absent_is_empty(self) -> None:
        assert extract_plain_text(None) == ""

    def test_absent_ignores_fallback(self) -> None:
        assert extract_plain_text(None, fallback="summary") == ""

    def test_plain_string_unchanged(self) -> None:
        text = "  already plain\nwith lines  "
        assert extract_plain_text(text) == text


class TestTraversal:
    def test_text_runs_concatenated_in_order(self) -> None:
        assert extract_plain_text(_doc(_para("Hello, ", "world", "!"))) == "Hello, world!"

    def test_line_break_after_each_block(self) -> None:
        doc = _doc(
            {"type": "heading", "attrs": {"level": 1}, "content": [{"type": "text", "text": "Title"}]},
            _para("first"),
            _para("second"),
        )
        assert extract_plain_text(doc) == "Title\nfirst\nsecond"

    def test_fixture_document(self, adf_description: DocNode) -> None:
        assert extract_plain_text(adf_description) == "Context\nAdds an index to orders."

    def test_unknown_kinds_are_transparent(self) -> None:
        doc = _doc(
            {
                "type": "bulletList",
                "content": [
                    {"type": "listItem", "content": [_para("one")]},
                    {"type": "listItem", "content": [_para("two")]},
                ],
            },
            {"type": "rule"},
            {"type": "mention", "attrs": {"id": "abc"}},
        )
        assert extract_plain_text(doc) == "one\ntwo"

    def test_empty_paragraph_still_breaks_line(self) -> None:
        doc = _doc(_para("a"), {"type": "paragraph"}, _para("b"))
        assert extract_plain_text(doc) == "a\n\nb"

    def test_result_is_trimmed(self) -> None:
        assert extract_plain_text(_doc(_para("   padded   "))) == "padded"


class TestMalformed:
    def test_text_node_without_text_uses_fallback(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.WARNING)
        doc = _doc({"type": "paragraph", "content": [{"type": "text"}]})
        assert extract_plain_text(doc, fallback="Issue summary") == "Issue summary"
        assert "fallback" in caplog.text

    def test_malformed_without_fallback_is_empty(self) -> None:
        doc = _doc({"type": "text"})
        assert extract_plain_text(doc) == ""
