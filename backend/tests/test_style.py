"""Tests for style resolution and option validation."""

from __future__ import annotations

import pytest

from markdown_docx.document_models import Alignment, Spacing
from markdown_docx.errors import InvalidMarkdownError, StyleValidationError
from markdown_docx.node_emitter import NodeEmitter
from markdown_docx.style import StyleConfig, StyleResolver
from markdown_docx.validation import coerce_options, validate_markdown, validate_style


@pytest.fixture
def resolver() -> StyleResolver:
    return StyleResolver()


def test_heading_defaults(resolver: StyleResolver) -> None:
    assert [resolver.heading_size(level) for level in range(1, 6)] == [32, 28, 24, 20, 18]
    assert resolver.heading_alignment(1) is Alignment.CENTER
    assert resolver.heading_alignment(2) is Alignment.RIGHT
    assert resolver.heading_alignment(3) is Alignment.LEFT


def test_heading_one_spacing_is_asymmetric(resolver: StyleResolver) -> None:
    assert resolver.heading_spacing(1) == Spacing(before=480, after=120)
    assert resolver.heading_spacing(3) == Spacing(before=240, after=240)


def test_paragraph_defaults(resolver: StyleResolver) -> None:
    assert resolver.paragraph_size == 24
    assert resolver.code_block_size == 20
    assert resolver.paragraph_alignment is Alignment.LEFT
    assert resolver.paragraph_spacing() == Spacing(before=240, after=240, line=276)


def test_title_size_applies_to_first_heading_level() -> None:
    resolver = StyleResolver(StyleConfig(title_size=40))

    assert resolver.heading_size(1) == 40
    assert resolver.heading_size(2) == 28


def test_explicit_heading_size_wins_over_title_size() -> None:
    resolver = StyleResolver(StyleConfig(title_size=40, heading1_size=36))

    assert resolver.heading_size(1) == 36


def test_camel_case_aliases_are_accepted() -> None:
    style = StyleConfig.model_validate({"paragraphSpacing": 100, "lineSpacing": 1.5})
    resolver = StyleResolver(style)

    assert resolver.paragraph_spacing() == Spacing(before=100, after=100, line=360)
    assert resolver.list_spacing() == Spacing(before=50, after=50)


def test_table_header_fill_depends_on_document_type() -> None:
    assert StyleResolver(document_type="document").table_header_fill == "F2F2F2"
    assert StyleResolver(document_type="report").table_header_fill == "DDDDDD"


def test_emitter_rejects_out_of_range_heading(resolver: StyleResolver) -> None:
    emitter = NodeEmitter(resolver)

    with pytest.raises(ValueError):
        emitter.heading(6, "too deep")


@pytest.mark.parametrize("value", [None, "", 42])
def test_invalid_markdown_is_rejected(value) -> None:
    with pytest.raises(InvalidMarkdownError) as excinfo:
        validate_markdown(value)

    assert excinfo.value.code == "invalid_markdown"


def test_out_of_range_title_size_names_alias() -> None:
    options = coerce_options({"titleSize": 90})

    with pytest.raises(StyleValidationError) as excinfo:
        validate_style(options.style)

    error = excinfo.value
    assert error.field == "title_size"
    assert error.value == 90
    assert error.code == "invalid_title_size"
    assert "titleSize" in error.message
    assert error.to_dict()["context"] == {"title_size": 90}


@pytest.mark.parametrize(
    ("style", "code"),
    [
        ({"paragraphSize": 4}, "invalid_font_size"),
        ({"headingSpacing": 800}, "invalid_heading_spacing"),
        ({"paragraphSpacing": -1}, "invalid_paragraph_spacing"),
        ({"lineSpacing": 3.5}, "invalid_line_spacing"),
    ],
)
def test_range_violations_have_distinct_codes(style: dict, code: str) -> None:
    with pytest.raises(StyleValidationError) as excinfo:
        validate_style(coerce_options({"style": style}).style)

    assert excinfo.value.code == code


def test_valid_style_passes() -> None:
    validate_style(StyleConfig(title_size=72, paragraph_spacing=0, line_spacing=1.0))


def test_malformed_option_type_is_reported() -> None:
    with pytest.raises(StyleValidationError) as excinfo:
        coerce_options({"documentType": "report", "titleSize": "huge"})

    assert excinfo.value.code == "invalid_option"
    assert excinfo.value.field == "title_size"


def test_flat_and_nested_options_are_equivalent() -> None:
    flat = coerce_options({"documentType": "report", "paragraphSize": 20})
    nested = coerce_options({"document_type": "report", "style": {"paragraph_size": 20}})

    assert flat == nested
    assert flat.document_type == "report"
