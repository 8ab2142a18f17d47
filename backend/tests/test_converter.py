"""End-to-end tests for DOCX generation."""

from __future__ import annotations

import asyncio
from io import BytesIO

import pytest
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt

from markdown_docx.converter import convert_markdown_to_docx
from markdown_docx.docx_renderer import DocxRenderer
from markdown_docx.errors import InvalidMarkdownError, MarkdownConversionError, StyleValidationError


class NoImages:
    async def fetch(self, url: str) -> bytes:
        raise RuntimeError("no network in tests")


def convert(markdown: str, options=None, image_fetcher=None):
    payload = asyncio.run(convert_markdown_to_docx(markdown, options, image_fetcher=image_fetcher or NoImages()))
    return Document(BytesIO(payload))


def non_empty(document) -> list:
    return [paragraph for paragraph in document.paragraphs if paragraph.text]


def test_headings_and_paragraphs_are_rendered() -> None:
    document = convert("# Title\n\nHello **world**")

    heading, paragraph = non_empty(document)
    assert heading.style.name == "Heading 1"
    assert heading.alignment == WD_ALIGN_PARAGRAPH.CENTER
    assert heading.runs[0].font.size == Pt(16)
    assert paragraph.text == "Hello world"
    assert [run.bold for run in paragraph.runs] == [None, True]


def test_table_is_rendered_with_shaded_header() -> None:
    document = convert("| A | B |\n|---|---|\n| 1 | 2 |", {"documentType": "report"})

    (table,) = document.tables
    assert [cell.text for cell in table.rows[0].cells] == ["A", "B"]
    assert [cell.text for cell in table.rows[1].cells] == ["1", "2"]
    shading = table.rows[0].cells[0]._tc.tcPr.find(qn("w:shd"))
    assert shading.get(qn("w:fill")) == "DDDDDD"
    assert table.style.name == "Table Grid"


def test_lists_quotes_and_code_blocks() -> None:
    document = convert(
        "- first\n**tail**\n1. second\n\n> quoted\n\nCOMMENT: check\n\n```sql\nSELECT 1;\n```"
    )

    paragraphs = non_empty(document)
    styles = [paragraph.style.name for paragraph in paragraphs]
    assert styles[:2] == ["List Bullet", "List Number"]
    assert paragraphs[0].runs[-1].text == "tail"
    assert paragraphs[0].runs[-1].bold is True
    assert paragraphs[2].text == "quoted"
    assert paragraphs[2].runs[0].italic is True
    assert paragraphs[3].text == "Comment: check"
    assert "SELECT 1;" in paragraphs[4].text
    assert paragraphs[4].runs[0].text.startswith("sql")
    assert paragraphs[4].runs[0].bold is True


def test_links_become_hyperlinks() -> None:
    document = convert("Read [the guide](https://example.com/guide) first")

    (paragraph,) = non_empty(document)
    hyperlinks = paragraph._p.findall(qn("w:hyperlink"))
    assert len(hyperlinks) == 1
    r_id = hyperlinks[0].get(qn("r:id"))
    assert paragraph.part.rels[r_id].target_ref == "https://example.com/guide"
    assert paragraph.runs[0].text == "Read "


def test_images_are_embedded(image_fetcher) -> None:
    document = convert("![Logo](https://example.com/logo.png)", image_fetcher=image_fetcher)

    assert len(document.inline_shapes) == 1


def test_failed_image_renders_placeholder() -> None:
    document = convert("![Logo](https://example.com/logo.png)")

    (paragraph,) = non_empty(document)
    assert paragraph.text == "[Image could not be loaded: Logo]"
    assert paragraph.alignment == WD_ALIGN_PARAGRAPH.CENTER
    assert len(document.inline_shapes) == 0


def test_toc_and_page_break() -> None:
    document = convert("[TOC]\n\\pagebreak\n# After")

    body = document.element.body
    instructions = [node.text for node in body.iter(qn("w:instrText"))]
    assert instructions == ['TOC \\o "1-5" \\h \\z \\u']
    breaks = [node for node in body.iter(qn("w:br")) if node.get(qn("w:type")) == "page"]
    assert len(breaks) == 1


def test_invalid_style_prevents_conversion() -> None:
    with pytest.raises(StyleValidationError) as excinfo:
        convert("# Title", {"titleSize": 90})

    assert excinfo.value.field == "title_size"
    assert "titleSize" in str(excinfo.value)


def test_empty_markdown_is_rejected() -> None:
    with pytest.raises(InvalidMarkdownError):
        convert("")


def test_renderer_failures_are_wrapped(monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(self, parsed) -> bytes:
        raise OSError("disk full")

    monkeypatch.setattr(DocxRenderer, "render", explode)

    with pytest.raises(MarkdownConversionError) as excinfo:
        convert("text")

    error = excinfo.value
    assert type(error) is MarkdownConversionError
    assert error.message.startswith("Failed to convert markdown to docx")
    assert "disk full" in error.context["original_error"]
    assert isinstance(error.__cause__, OSError)


def numbering_ids(document) -> list[int]:
    return [
        paragraph._p.pPr.numPr.numId.val
        for paragraph in document.paragraphs
        if paragraph.style.name == "List Number"
    ]


def test_separate_ordered_lists_restart_numbering() -> None:
    document = convert("1. a\n2. b\n\ntext\n\n1. c")

    first, second, third = numbering_ids(document)
    assert first == second
    assert third != first

    numbering = document.part.numbering_part.element
    for num_id in (first, third):
        num = numbering.num_having_numId(num_id)
        overrides = num.findall(qn("w:lvlOverride"))
        assert overrides[0].find(qn("w:startOverride")).get(qn("w:val")) == "1"


def test_code_block_tabs_keep_their_width() -> None:
    document = convert("```\n\tindented\n```")

    (paragraph,) = non_empty(document)
    assert paragraph.runs[0].text == "\u00a0" * 4 + "indented"
