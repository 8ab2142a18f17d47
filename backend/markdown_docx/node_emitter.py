"""Build document nodes with resolved size, spacing and alignment."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from .document_models import (
    Alignment,
    Blockquote,
    CodeBlock,
    Comment,
    Heading,
    Image,
    Link,
    ListItem,
    PageBreak,
    Paragraph,
    Spacer,
    Table,
    TableData,
    TableOfContents,
    TextRun,
)
from .inline_formatter import format_inline, plain_text
from .style import StyleResolver

ALERT_COLOR = "FF0000"
TEXT_COLOR = "000000"
MAX_HEADING_LEVEL = 5


def _strip_blank_edges(lines: Iterable[str]) -> tuple[str, ...]:
    collected = list(lines)
    while collected and not collected[0].strip():
        collected.pop(0)
    while collected and not collected[-1].strip():
        collected.pop()
    return tuple(collected)


def strip_pipes(line: str) -> str:
    return line.replace("|", "").strip()


class NodeEmitter:
    """Merge recognised blocks with the active style configuration."""

    def __init__(self, resolver: StyleResolver, *, image_width_px: int = 200, image_height_px: int = 200) -> None:
        self.resolver = resolver
        self.image_width_px = image_width_px
        self.image_height_px = image_height_px

    @property
    def document_type(self):
        return self.resolver.document_type

    def heading(self, level: int, text: str) -> Heading:
        if not 1 <= level <= MAX_HEADING_LEVEL:
            raise ValueError(f"Unsupported heading level: {level}")
        size = self.resolver.heading_size(level)
        runs = tuple(
            TextRun(
                text=run.text,
                bold=True,
                italic=run.italic,
                is_code=run.is_code,
                color=TEXT_COLOR,
                size=size,
            )
            for run in format_inline(text)
        )
        return Heading(
            level=level,
            text=plain_text(runs),
            runs=runs,
            size=size,
            alignment=self.resolver.heading_alignment(level),
            spacing=self.resolver.heading_spacing(level),
        )

    def paragraph(self, runs: Iterable[TextRun]) -> Paragraph:
        size = self.resolver.paragraph_size
        sized = tuple(run if run.is_code else _with_size(run, size) for run in runs)
        return Paragraph(
            runs=sized,
            alignment=self.resolver.paragraph_alignment,
            spacing=self.resolver.paragraph_spacing(),
        )

    def plain_paragraph(self, text: str) -> Paragraph:
        return self.paragraph([TextRun(text=text, color=TEXT_COLOR)])

    def spacer(self) -> Spacer:
        return Spacer()

    def list_item(self, text: str, *, bold_tail: str | None = None, ordered: bool = False) -> ListItem:
        size = self.resolver.list_item_size
        return ListItem(
            text=text,
            runs=tuple(_with_size(run, size) for run in format_inline(text)),
            bold_tail=bold_tail or None,
            ordered=ordered,
            size=size,
            spacing=self.resolver.list_spacing(),
        )

    def extend_list_item(self, item: ListItem, continuation: str) -> ListItem:
        """Append a lazy continuation line to a pending list item."""

        text = f"{item.text} {continuation}".strip()
        return self.list_item(text, bold_tail=item.bold_tail, ordered=item.ordered)

    def table(self, data: TableData) -> Table:
        if not data.is_well_formed:
            raise ValueError(
                f"Table rows do not match the {len(data.headers)} header cells"
            )
        return Table(
            headers=tuple(data.headers),
            rows=tuple(tuple(row) for row in data.rows),
            header_fill=self.resolver.table_header_fill,
        )

    def table_fallback(self, lines: Iterable[str]) -> list[Paragraph]:
        """Render a table block that could not be used as plain paragraphs."""

        paragraphs: list[Paragraph] = []
        for line in lines:
            text = strip_pipes(line)
            if text:
                paragraphs.append(self.plain_paragraph(text))
        return paragraphs

    def blockquote(self, text: str) -> Blockquote:
        return Blockquote(
            text=text,
            size=self.resolver.blockquote_size,
            alignment=self.resolver.blockquote_alignment,
            spacing=self.resolver.block_spacing(),
        )

    def comment(self, text: str) -> Comment:
        return Comment(text=text, spacing=self.resolver.block_spacing())

    def code_block(self, lines: Iterable[str], language: str | None = None) -> CodeBlock:
        return CodeBlock(
            raw_lines=_strip_blank_edges(lines),
            language=language or None,
            size=self.resolver.code_block_size,
            spacing=self.resolver.code_block_spacing(),
        )

    def image(self, alt_text: str, source_url: str, data: bytes) -> Image:
        return Image(
            alt_text=alt_text,
            source_url=source_url,
            data=data,
            width_px=self.image_width_px,
            height_px=self.image_height_px,
            spacing=self.resolver.block_spacing(),
        )

    def image_placeholder(self, alt_text: str) -> Paragraph:
        return Paragraph(
            runs=(TextRun(text=f"[Image could not be loaded: {alt_text}]", italic=True, color=ALERT_COLOR),),
            alignment=Alignment.CENTER,
        )

    def link(self, text: str, url: str, *, before: str = "", after: str = "") -> Link:
        return Link(
            text=text,
            url=url,
            leading_runs=tuple(format_inline(before)),
            trailing_runs=tuple(format_inline(after)),
            spacing=self.resolver.block_spacing(),
        )

    def page_break(self) -> PageBreak:
        return PageBreak()

    def table_of_contents(self) -> TableOfContents:
        return TableOfContents(max_level=MAX_HEADING_LEVEL)


def _with_size(run: TextRun, size: int) -> TextRun:
    if run.size is not None:
        return run
    return replace(run, size=size)


__all__ = ["NodeEmitter", "strip_pipes"]
