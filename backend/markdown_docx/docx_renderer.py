"""Render parsed block nodes into a DOCX payload with python-docx."""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Iterable

from docx import Document
from docx.enum.section import WD_ORIENT
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_BREAK, WD_LINE_SPACING
from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Pt, RGBColor, Twips

from .document_models import (
    Alignment,
    Block,
    Blockquote,
    CodeBlock,
    Comment,
    Document as ParsedDocument,
    Heading,
    Image,
    Link,
    ListItem,
    PageBreak,
    Paragraph,
    Spacer,
    Spacing,
    Table,
    TableOfContents,
    TextRun,
)
from .style import StyleResolver

logger = logging.getLogger(__name__)

CODE_FONT = "Courier New"
INLINE_CODE_SIZE = 20
CODE_LABEL_SIZE = 18
CODE_COLOR = "444444"
CODE_FILL = "F5F5F5"
CODE_BORDER_COLOR = "DDDDDD"
CODE_INDENT = 360
QUOTE_INDENT = 720
QUOTE_BORDER_COLOR = "AAAAAA"
COMMENT_COLOR = "666666"
LINK_COLOR = "0000FF"
TEXT_COLOR = "000000"
NBSP = "\u00a0"
TAB_WIDTH = 4
EMU_PER_PIXEL = 9525
TABLE_CELL_MARGIN = 100

PAGE_MARGINS = {"top": 1440, "right": 1080, "bottom": 1440, "left": 1080}

# Heading style defaults: size (half-points), space before, space after (twips)
HEADING_STYLES = {
    1: (32, 360, 240),
    2: (28, 320, 160),
    3: (24, 280, 120),
    4: (20, 240, 120),
    5: (18, 220, 100),
}

_ALIGNMENTS = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
    Alignment.JUSTIFIED: WD_ALIGN_PARAGRAPH.JUSTIFY,
}

# Elements that must follow w:pBdr / w:shd inside w:pPr
_PPR_AFTER_SHD = (
    "w:tabs", "w:suppressAutoHyphens", "w:kinsoku", "w:wordWrap", "w:overflowPunct",
    "w:topLinePunct", "w:autoSpaceDE", "w:autoSpaceDN", "w:bidi", "w:adjustRightInd",
    "w:snapToGrid", "w:spacing", "w:ind", "w:contextualSpacing", "w:mirrorIndents",
    "w:suppressOverlap", "w:jc", "w:textDirection", "w:textAlignment", "w:textboxTightWrap",
    "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr", "w:pPrChange",
)
_PPR_AFTER_BDR = ("w:shd",) + _PPR_AFTER_SHD
_TCPR_AFTER_SHD = ("w:noWrap", "w:tcMar", "w:textDirection", "w:tcFitText", "w:vAlign", "w:hideMark")
_TBLPR_AFTER_CELL_MAR = ("w:tblLook", "w:tblCaption", "w:tblDescription", "w:tblPrChange")


def _half_points(size: int) -> Pt:
    return Pt(size / 2)


def _shading(fill: str):
    shd = OxmlElement("w:shd")
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill)
    return shd


def _border_group(sides: Iterable[str], size: int, color: str):
    p_bdr = OxmlElement("w:pBdr")
    for side in sides:
        node = OxmlElement(f"w:{side}")
        node.set(qn("w:val"), "single")
        node.set(qn("w:sz"), str(size))
        node.set(qn("w:space"), "1")
        node.set(qn("w:color"), color)
        p_bdr.append(node)
    return p_bdr


def _remove_placeholder_paragraph(document) -> None:
    """Remove the placeholder paragraph that python-docx creates by default."""

    if document.paragraphs:
        paragraph = document.paragraphs[0]
        element = paragraph._element  # type: ignore[attr-defined]
        parent = element.getparent()
        if parent is not None:
            parent.remove(element)


def _restart_numbering(document, style_name: str) -> int | None:
    """Add a numbering instance that restarts the style's list at 1.

    Returns the new numId, or None when the style carries no numbering.
    """

    p_pr = document.styles[style_name].element.pPr
    num_pr = p_pr.numPr if p_pr is not None else None
    if num_pr is None or num_pr.numId is None:
        return None
    numbering = document.part.numbering_part.element
    style_num = numbering.num_having_numId(num_pr.numId.val)
    num = numbering.add_num(style_num.abstractNumId.val)
    num.add_lvlOverride(ilvl=0).add_startOverride(1)
    return num.numId


class DocxRenderer:
    """Serialise a parsed document into DOCX bytes."""

    def __init__(self, resolver: StyleResolver | None = None) -> None:
        self.resolver = resolver or StyleResolver()
        self._list_num_id: int | None = None

    def render(self, parsed: ParsedDocument) -> bytes:
        document = Document()
        _remove_placeholder_paragraph(document)
        self._configure_page(document)
        self._configure_styles(document)

        # numId of the ordered list being rendered; a new one restarts at 1
        self._list_num_id = None
        for block in parsed.blocks:
            if not (isinstance(block, ListItem) and block.ordered):
                self._list_num_id = None
            self._render_block(document, block)

        buffer = BytesIO()
        document.save(buffer)
        payload = buffer.getvalue()
        logger.info("Rendered %s blocks into %s bytes", len(parsed.blocks), len(payload))
        return payload

    # ------------------------------------------------------------------
    # Document setup
    # ------------------------------------------------------------------
    @staticmethod
    def _configure_page(document) -> None:
        for section in document.sections:
            section.orientation = WD_ORIENT.PORTRAIT
            section.top_margin = Twips(PAGE_MARGINS["top"])
            section.right_margin = Twips(PAGE_MARGINS["right"])
            section.bottom_margin = Twips(PAGE_MARGINS["bottom"])
            section.left_margin = Twips(PAGE_MARGINS["left"])

    def _configure_styles(self, document) -> None:
        styles = document.styles

        title = styles["Title"]
        title.font.size = _half_points(self.resolver.title_size)
        title.font.bold = True
        title.font.color.rgb = RGBColor.from_string(TEXT_COLOR)
        title.paragraph_format.space_after = Twips(240)
        title.paragraph_format.line_spacing = 1.15
        title.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.CENTER

        for level, (size, before, after) in HEADING_STYLES.items():
            style = styles[f"Heading {level}"]
            style.font.size = _half_points(size)
            style.font.bold = True
            style.font.color.rgb = RGBColor.from_string(TEXT_COLOR)
            style.paragraph_format.space_before = Twips(before)
            style.paragraph_format.space_after = Twips(after)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------
    def _render_block(self, document, block: Block) -> None:
        if isinstance(block, Heading):
            self._render_heading(document, block)
        elif isinstance(block, Paragraph):
            paragraph = document.add_paragraph()
            self._add_runs(paragraph, block.runs)
            self._apply_format(paragraph, block.spacing, block.alignment)
        elif isinstance(block, Spacer):
            document.add_paragraph()
        elif isinstance(block, ListItem):
            self._render_list_item(document, block)
        elif isinstance(block, Table):
            self._render_table(document, block)
        elif isinstance(block, Blockquote):
            self._render_blockquote(document, block)
        elif isinstance(block, Comment):
            paragraph = document.add_paragraph()
            self._add_run(paragraph, TextRun(text=f"Comment: {block.text}", italic=True, color=COMMENT_COLOR))
            self._apply_format(paragraph, block.spacing, None)
        elif isinstance(block, CodeBlock):
            self._render_code_block(document, block)
        elif isinstance(block, Image):
            self._render_image(document, block)
        elif isinstance(block, Link):
            paragraph = document.add_paragraph()
            self._add_runs(paragraph, block.leading_runs)
            self._add_hyperlink(paragraph, block.text, block.url)
            self._add_runs(paragraph, block.trailing_runs)
            self._apply_format(paragraph, block.spacing, None)
        elif isinstance(block, TableOfContents):
            self._render_table_of_contents(document, block)
        elif isinstance(block, PageBreak):
            document.add_paragraph().add_run().add_break(WD_BREAK.PAGE)
        else:
            raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def _render_heading(self, document, block: Heading) -> None:
        paragraph = document.add_paragraph(style=block.style_name)
        self._add_runs(paragraph, block.runs)
        self._apply_format(paragraph, block.spacing, block.alignment)

    def _render_list_item(self, document, block: ListItem) -> None:
        style = "List Number" if block.ordered else "List Bullet"
        paragraph = document.add_paragraph(style=style)
        if block.ordered:
            if self._list_num_id is None:
                self._list_num_id = _restart_numbering(document, style)
            if self._list_num_id is not None:
                num_pr = paragraph._p.get_or_add_pPr().get_or_add_numPr()
                num_pr.get_or_add_ilvl().val = 0
                num_pr.get_or_add_numId().val = self._list_num_id
        self._add_runs(paragraph, block.runs)
        if block.bold_tail:
            runs = paragraph.runs
            if runs:
                runs[-1].add_break()
            self._add_run(paragraph, TextRun(text=block.bold_tail, bold=True, color=TEXT_COLOR, size=block.size))
        self._apply_format(paragraph, block.spacing, None)

    def _render_table(self, document, block: Table) -> None:
        column_count = len(block.headers)
        table = document.add_table(rows=1 + len(block.rows), cols=column_count)
        table.style = "Table Grid"
        table.autofit = False
        self._set_table_width(table)
        self._set_cell_margins(table)

        header_row = table.rows[0]
        self._mark_header_row(header_row)
        for column_index, header in enumerate(block.headers):
            cell = header_row.cells[column_index]
            paragraph = cell.paragraphs[0]
            paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
            self._add_run(paragraph, TextRun(text=header, bold=True, color=TEXT_COLOR))
            tc_pr = cell._tc.get_or_add_tcPr()
            tc_pr.insert_element_before(_shading(block.header_fill), *_TCPR_AFTER_SHD)

        for row_index, row in enumerate(block.rows, start=1):
            cells = table.rows[row_index].cells
            for column_index in range(column_count):
                value = row[column_index] if column_index < len(row) else ""
                self._add_run(cells[column_index].paragraphs[0], TextRun(text=value, color=TEXT_COLOR))

    def _render_blockquote(self, document, block: Blockquote) -> None:
        paragraph = document.add_paragraph()
        p_pr = paragraph._p.get_or_add_pPr()
        p_pr.insert_element_before(_border_group(("left",), 3, QUOTE_BORDER_COLOR), *_PPR_AFTER_BDR)
        self._add_run(paragraph, TextRun(text=block.text, italic=True, color=TEXT_COLOR, size=block.size))
        self._apply_format(paragraph, block.spacing, block.alignment)
        paragraph.paragraph_format.left_indent = Twips(QUOTE_INDENT)

    def _render_code_block(self, document, block: CodeBlock) -> None:
        paragraph = document.add_paragraph()
        p_pr = paragraph._p.get_or_add_pPr()
        p_pr.insert_element_before(
            _border_group(("top", "left", "bottom", "right"), 1, CODE_BORDER_COLOR),
            *_PPR_AFTER_BDR,
        )
        p_pr.insert_element_before(_shading(CODE_FILL), *_PPR_AFTER_SHD)

        if block.language:
            label = paragraph.add_run(block.language)
            label.bold = True
            label.font.name = CODE_FONT
            label.font.size = _half_points(CODE_LABEL_SIZE)
            label.font.color.rgb = RGBColor.from_string(COMMENT_COLOR)
            label.add_break()

        size = block.size or INLINE_CODE_SIZE
        for position, line in enumerate(block.raw_lines):
            expanded = line.expandtabs(TAB_WIDTH)
            leading = len(expanded) - len(expanded.lstrip())
            run = paragraph.add_run(NBSP * leading + expanded[leading:])
            run.font.name = CODE_FONT
            run.font.size = _half_points(size)
            run.font.color.rgb = RGBColor.from_string(CODE_COLOR)
            if position < len(block.raw_lines) - 1:
                run.add_break()

        self._apply_format(paragraph, block.spacing, None)
        paragraph.paragraph_format.left_indent = Twips(CODE_INDENT)

    def _render_image(self, document, block: Image) -> None:
        paragraph = document.add_paragraph()
        paragraph.add_run().add_picture(
            BytesIO(block.data),
            width=Emu(block.width_px * EMU_PER_PIXEL),
            height=Emu(block.height_px * EMU_PER_PIXEL),
        )
        self._apply_format(paragraph, block.spacing, Alignment.CENTER)

    @staticmethod
    def _render_table_of_contents(document, block: TableOfContents) -> None:
        run = document.add_paragraph().add_run()
        begin = OxmlElement("w:fldChar")
        begin.set(qn("w:fldCharType"), "begin")
        instruction = OxmlElement("w:instrText")
        instruction.set(qn("xml:space"), "preserve")
        instruction.text = f'TOC \\o "1-{block.max_level}" \\h \\z \\u'
        separate = OxmlElement("w:fldChar")
        separate.set(qn("w:fldCharType"), "separate")
        placeholder = OxmlElement("w:t")
        placeholder.text = "Update field to build the table of contents."
        end = OxmlElement("w:fldChar")
        end.set(qn("w:fldCharType"), "end")
        for element in (begin, instruction, separate, placeholder, end):
            run._r.append(element)

    # ------------------------------------------------------------------
    # Runs and formatting
    # ------------------------------------------------------------------
    def _add_runs(self, paragraph, runs: Iterable[TextRun]) -> None:
        for run in runs:
            self._add_run(paragraph, run)

    @staticmethod
    def _add_run(paragraph, text_run: TextRun):
        run = paragraph.add_run(text_run.text)
        if text_run.is_code:
            run.font.name = CODE_FONT
            run.font.size = _half_points(INLINE_CODE_SIZE)
            run.font.color.rgb = RGBColor.from_string(CODE_COLOR)
        else:
            if text_run.size is not None:
                run.font.size = _half_points(text_run.size)
            run.font.color.rgb = RGBColor.from_string(text_run.color or TEXT_COLOR)
        if text_run.bold:
            run.bold = True
        if text_run.italic:
            run.italic = True
        if text_run.is_code:
            run._element.get_or_add_rPr().append(_shading(CODE_FILL))
        return run

    @staticmethod
    def _add_hyperlink(paragraph, text: str, url: str) -> None:
        """Insert a clickable external hyperlink into a paragraph."""

        r_id = paragraph.part.relate_to(url, RT.HYPERLINK, is_external=True)
        hyperlink = OxmlElement("w:hyperlink")
        hyperlink.set(qn("r:id"), r_id)

        run = OxmlElement("w:r")
        r_pr = OxmlElement("w:rPr")
        color = OxmlElement("w:color")
        color.set(qn("w:val"), LINK_COLOR)
        underline = OxmlElement("w:u")
        underline.set(qn("w:val"), "single")
        r_pr.append(color)
        r_pr.append(underline)
        run.append(r_pr)
        text_element = OxmlElement("w:t")
        text_element.text = text
        run.append(text_element)
        hyperlink.append(run)
        paragraph._p.append(hyperlink)

    @staticmethod
    def _apply_format(paragraph, spacing: Spacing, alignment: Alignment | None) -> None:
        paragraph_format = paragraph.paragraph_format
        paragraph_format.space_before = Twips(spacing.before)
        paragraph_format.space_after = Twips(spacing.after)
        if spacing.line is not None:
            if spacing.exact:
                paragraph_format.line_spacing_rule = WD_LINE_SPACING.EXACTLY
                paragraph_format.line_spacing = Twips(spacing.line)
            else:
                paragraph_format.line_spacing = spacing.line / 240
        if alignment is not None:
            paragraph.alignment = _ALIGNMENTS[alignment]

    # ------------------------------------------------------------------
    # Table helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _set_table_width(table) -> None:
        tbl_pr = table._tbl.tblPr
        tbl_w = tbl_pr.find(qn("w:tblW"))
        if tbl_w is None:
            tbl_w = OxmlElement("w:tblW")
            tbl_pr.insert_element_before(
                tbl_w,
                "w:jc", "w:tblCellSpacing", "w:tblInd", "w:tblBorders", "w:shd",
                "w:tblLayout", "w:tblCellMar", *_TBLPR_AFTER_CELL_MAR,
            )
        tbl_w.set(qn("w:type"), "pct")
        tbl_w.set(qn("w:w"), "5000")

    @staticmethod
    def _set_cell_margins(table) -> None:
        tbl_pr = table._tbl.tblPr
        cell_margins = OxmlElement("w:tblCellMar")
        for side in ("top", "left", "bottom", "right"):
            node = OxmlElement(f"w:{side}")
            node.set(qn("w:w"), str(TABLE_CELL_MARGIN))
            node.set(qn("w:type"), "dxa")
            cell_margins.append(node)
        tbl_pr.insert_element_before(cell_margins, *_TBLPR_AFTER_CELL_MAR)

    @staticmethod
    def _mark_header_row(row) -> None:
        tr_pr = row._tr.get_or_add_trPr()
        header = OxmlElement("w:tblHeader")
        header.set(qn("w:val"), "true")
        tr_pr.append(header)


__all__ = ["DocxRenderer"]
