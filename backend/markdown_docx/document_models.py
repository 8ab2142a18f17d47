"""Abstract document nodes produced by the markdown parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union

DocumentType = Literal["document", "report"]


class Alignment(str, Enum):
    """Paragraph alignment understood by the renderer."""

    LEFT = "LEFT"
    CENTER = "CENTER"
    RIGHT = "RIGHT"
    JUSTIFIED = "JUSTIFIED"


@dataclass(frozen=True, slots=True)
class Spacing:
    """Paragraph spacing.

    Parameters
    ----------
    before, after:
        Space around the paragraph in twentieths of a point.
    line:
        Line height on a 240-unit baseline (240 == single spacing).
    exact:
        Whether ``line`` is an exact height in twips instead of a multiple.
    """

    before: int = 0
    after: int = 0
    line: int | None = None
    exact: bool = False


@dataclass(frozen=True, slots=True)
class TextRun:
    """A contiguous span of text sharing one formatting state."""

    text: str
    bold: bool = False
    italic: bool = False
    is_code: bool = False
    color: str | None = None
    size: int | None = None


@dataclass(slots=True)
class TableData:
    """A pipe table located by the pre-scanner.

    Parameters
    ----------
    headers:
        Header cell strings, in column order.
    rows:
        Body rows, each an ordered list of cell strings.
    """

    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        """Source lines covered by the block: header, separator and body rows."""

        return 2 + len(self.rows)

    @property
    def is_well_formed(self) -> bool:
        if not self.headers:
            return False
        return all(len(row) == len(self.headers) for row in self.rows)


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    text: str
    runs: tuple[TextRun, ...]
    size: int
    alignment: Alignment
    spacing: Spacing

    @property
    def style_name(self) -> str:
        return f"Heading {self.level}"


@dataclass(frozen=True, slots=True)
class Paragraph:
    runs: tuple[TextRun, ...]
    alignment: Alignment | None = None
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class Spacer:
    """Empty paragraph emitted for a blank source line."""


@dataclass(frozen=True, slots=True)
class ListItem:
    text: str
    runs: tuple[TextRun, ...]
    bold_tail: str | None = None
    ordered: bool = False
    size: int | None = None
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class Table:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    header_fill: str


@dataclass(frozen=True, slots=True)
class Blockquote:
    text: str
    size: int | None = None
    alignment: Alignment | None = None
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class Comment:
    text: str
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class CodeBlock:
    raw_lines: tuple[str, ...]
    language: str | None = None
    size: int | None = None
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class Image:
    alt_text: str
    source_url: str
    data: bytes = field(repr=False)
    width_px: int
    height_px: int
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class Link:
    text: str
    url: str
    leading_runs: tuple[TextRun, ...] = ()
    trailing_runs: tuple[TextRun, ...] = ()
    spacing: Spacing = Spacing()


@dataclass(frozen=True, slots=True)
class PageBreak:
    """Forced page break (``\\pagebreak`` marker)."""


@dataclass(frozen=True, slots=True)
class TableOfContents:
    """Table of contents field (``[TOC]`` marker)."""

    max_level: int = 5


Block = Union[
    Heading,
    Paragraph,
    Spacer,
    ListItem,
    Table,
    Blockquote,
    Comment,
    CodeBlock,
    Image,
    Link,
    PageBreak,
    TableOfContents,
]


@dataclass(frozen=True, slots=True)
class Document:
    """Ordered, immutable result of one conversion call."""

    blocks: tuple[Block, ...]
    document_type: DocumentType = "document"

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


__all__ = [
    "Alignment",
    "Block",
    "Blockquote",
    "CodeBlock",
    "Comment",
    "Document",
    "DocumentType",
    "Heading",
    "Image",
    "Link",
    "ListItem",
    "PageBreak",
    "Paragraph",
    "Spacer",
    "Spacing",
    "Table",
    "TableData",
    "TableOfContents",
    "TextRun",
]
