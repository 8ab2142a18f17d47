"""Style configuration and the resolver that turns it into concrete values.

Sizes are half-points, spacing values are twentieths of a point (twips) and
line spacing is a multiplier applied to a 240-unit baseline.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .document_models import Alignment, DocumentType, Spacing

LINE_BASELINE = 240
CODE_BLOCK_LINE_HEIGHT = 360


class StyleConfig(BaseModel):
    """Optional per-call style overrides. Unset fields fall back to defaults."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    title_size: Optional[int] = Field(default=None, alias="titleSize", description="Title size in half-points")
    heading1_size: Optional[int] = Field(default=None, alias="heading1Size")
    heading2_size: Optional[int] = Field(default=None, alias="heading2Size")
    heading3_size: Optional[int] = Field(default=None, alias="heading3Size")
    heading4_size: Optional[int] = Field(default=None, alias="heading4Size")
    heading5_size: Optional[int] = Field(default=None, alias="heading5Size")
    paragraph_size: Optional[int] = Field(default=None, alias="paragraphSize")
    list_item_size: Optional[int] = Field(default=None, alias="listItemSize")
    code_block_size: Optional[int] = Field(default=None, alias="codeBlockSize")
    blockquote_size: Optional[int] = Field(default=None, alias="blockquoteSize")
    heading_spacing: Optional[int] = Field(
        default=None,
        alias="headingSpacing",
        description="Space around headings in twips",
    )
    paragraph_spacing: Optional[int] = Field(
        default=None,
        alias="paragraphSpacing",
        description="Space around paragraphs in twips",
    )
    line_spacing: Optional[float] = Field(
        default=None,
        alias="lineSpacing",
        description="Line spacing multiplier",
    )
    heading1_alignment: Optional[Alignment] = Field(default=None, alias="heading1Alignment")
    heading2_alignment: Optional[Alignment] = Field(default=None, alias="heading2Alignment")
    heading3_alignment: Optional[Alignment] = Field(default=None, alias="heading3Alignment")
    heading4_alignment: Optional[Alignment] = Field(default=None, alias="heading4Alignment")
    heading5_alignment: Optional[Alignment] = Field(default=None, alias="heading5Alignment")
    paragraph_alignment: Optional[Alignment] = Field(default=None, alias="paragraphAlignment")
    blockquote_alignment: Optional[Alignment] = Field(default=None, alias="blockquoteAlignment")


class ConversionOptions(BaseModel):
    """Options accepted by the conversion entry point."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    document_type: DocumentType = Field(default="document", alias="documentType")
    style: StyleConfig = Field(default_factory=StyleConfig)


@dataclass(frozen=True, slots=True)
class HeadingDefaults:
    size: int
    alignment: Alignment


HEADING_DEFAULTS: dict[int, HeadingDefaults] = {
    1: HeadingDefaults(size=32, alignment=Alignment.CENTER),
    2: HeadingDefaults(size=28, alignment=Alignment.RIGHT),
    3: HeadingDefaults(size=24, alignment=Alignment.LEFT),
    4: HeadingDefaults(size=20, alignment=Alignment.LEFT),
    5: HeadingDefaults(size=18, alignment=Alignment.LEFT),
}

ELEMENT_DEFAULTS: dict[str, object] = {
    "title_size": 32,
    "paragraph_size": 24,
    "list_item_size": 24,
    "code_block_size": 20,
    "blockquote_size": 24,
    "heading_spacing": 240,
    "paragraph_spacing": 240,
    "line_spacing": 1.15,
}

GLOBAL_SIZE = 24
GLOBAL_SPACING = 240
GLOBAL_LINE_SPACING = 1.0
GLOBAL_ALIGNMENT = Alignment.LEFT

TABLE_HEADER_FILLS: dict[str, str] = {
    "report": "DDDDDD",
    "document": "F2F2F2",
}


class StyleResolver:
    """Resolve concrete sizes, spacing and alignment for each element.

    Resolution order: explicit option, element default, global fallback.
    """

    def __init__(self, style: StyleConfig | None = None, document_type: DocumentType = "document") -> None:
        self.style = style or StyleConfig()
        self.document_type = document_type

    def _explicit(self, name: str):
        return getattr(self.style, name, None)

    def _size(self, name: str) -> int:
        value = self._explicit(name)
        if value is None:
            value = ELEMENT_DEFAULTS.get(name, GLOBAL_SIZE)
        return int(value)

    # ------------------------------------------------------------------
    # Sizes
    # ------------------------------------------------------------------
    @property
    def title_size(self) -> int:
        return self._size("title_size")

    def heading_size(self, level: int) -> int:
        explicit = self._explicit(f"heading{level}_size")
        if explicit is None and level == 1:
            explicit = self._explicit("title_size")
        if explicit is not None:
            return int(explicit)
        defaults = HEADING_DEFAULTS.get(level)
        return defaults.size if defaults else GLOBAL_SIZE

    @property
    def paragraph_size(self) -> int:
        return self._size("paragraph_size")

    @property
    def list_item_size(self) -> int:
        return self._size("list_item_size")

    @property
    def code_block_size(self) -> int:
        return self._size("code_block_size")

    @property
    def blockquote_size(self) -> int:
        return self._size("blockquote_size")

    # ------------------------------------------------------------------
    # Alignment
    # ------------------------------------------------------------------
    def heading_alignment(self, level: int) -> Alignment:
        explicit = self._explicit(f"heading{level}_alignment")
        if explicit is not None:
            return Alignment(explicit)
        defaults = HEADING_DEFAULTS.get(level)
        return defaults.alignment if defaults else GLOBAL_ALIGNMENT

    @property
    def paragraph_alignment(self) -> Alignment:
        return Alignment(self._explicit("paragraph_alignment") or GLOBAL_ALIGNMENT)

    @property
    def blockquote_alignment(self) -> Alignment:
        return Alignment(self._explicit("blockquote_alignment") or GLOBAL_ALIGNMENT)

    # ------------------------------------------------------------------
    # Spacing
    # ------------------------------------------------------------------
    def _spacing_value(self, name: str) -> int:
        value = self._explicit(name)
        if value is None:
            value = ELEMENT_DEFAULTS.get(name, GLOBAL_SPACING)
        return int(value)

    @property
    def heading_spacing_value(self) -> int:
        return self._spacing_value("heading_spacing")

    @property
    def paragraph_spacing_value(self) -> int:
        return self._spacing_value("paragraph_spacing")

    @property
    def line_spacing(self) -> float:
        value = self._explicit("line_spacing")
        if value is None:
            value = ELEMENT_DEFAULTS.get("line_spacing", GLOBAL_LINE_SPACING)
        return float(value)

    @property
    def line_units(self) -> int:
        return round(self.line_spacing * LINE_BASELINE)

    def heading_spacing(self, level: int) -> Spacing:
        spacing = self.heading_spacing_value
        if level == 1:
            return Spacing(before=spacing * 2, after=spacing // 2)
        return Spacing(before=spacing, after=spacing)

    def paragraph_spacing(self) -> Spacing:
        spacing = self.paragraph_spacing_value
        return Spacing(before=spacing, after=spacing, line=self.line_units)

    def block_spacing(self) -> Spacing:
        spacing = self.paragraph_spacing_value
        return Spacing(before=spacing, after=spacing)

    def list_spacing(self) -> Spacing:
        spacing = self.paragraph_spacing_value // 2
        return Spacing(before=spacing, after=spacing)

    def code_block_spacing(self) -> Spacing:
        spacing = self.paragraph_spacing_value
        return Spacing(before=spacing, after=spacing, line=CODE_BLOCK_LINE_HEIGHT, exact=True)

    # ------------------------------------------------------------------
    @property
    def table_header_fill(self) -> str:
        return TABLE_HEADER_FILLS.get(self.document_type, TABLE_HEADER_FILLS["document"])


__all__ = [
    "CODE_BLOCK_LINE_HEIGHT",
    "ConversionOptions",
    "HEADING_DEFAULTS",
    "LINE_BASELINE",
    "StyleConfig",
    "StyleResolver",
]
