"""Tests for inline emphasis and code spans."""

from __future__ import annotations

from markdown_docx.document_models import TextRun
from markdown_docx.inline_formatter import format_inline, plain_text


def test_plain_text_is_a_single_run() -> None:
    assert format_inline("Hello world") == [TextRun(text="Hello world")]


def test_bold_segment() -> None:
    assert format_inline("Hello **world**") == [
        TextRun(text="Hello "),
        TextRun(text="world", bold=True),
    ]


def test_italic_segment() -> None:
    assert format_inline("an *em* word") == [
        TextRun(text="an "),
        TextRun(text="em", italic=True),
        TextRun(text=" word"),
    ]


def test_triple_asterisks_give_bold_italic_run() -> None:
    assert format_inline("***text***") == [TextRun(text="text", bold=True, italic=True)]


def test_inline_code_keeps_emphasis_flags() -> None:
    runs = format_inline("**use `pip` now**")

    assert runs == [
        TextRun(text="use ", bold=True),
        TextRun(text="pip", bold=True, is_code=True),
        TextRun(text=" now", bold=True),
    ]


def test_markers_are_removed_from_text() -> None:
    runs = format_inline("a **b** *c* `d`")

    assert plain_text(runs) == "a b c d"


def test_unclosed_marker_stays_active_until_end_of_line() -> None:
    assert format_inline("start **open") == [
        TextRun(text="start "),
        TextRun(text="open", bold=True),
    ]
    assert format_inline("next line") == [TextRun(text="next line")]


def test_empty_line_has_no_runs() -> None:
    assert format_inline("") == []
