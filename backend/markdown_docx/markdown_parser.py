"""Line-oriented markdown parser producing abstract document nodes.

The parser walks the source once, forward only. Each non-blank line is
dispatched to the first matching handler:

1. blank line            6. table marker
2. code fence            7. unordered list item
3. code block body       8. ordered list item
4. ``[TOC]`` / page break 9. blockquote / ``COMMENT:``
5. heading              10. image, link, plain paragraph

Tables are located up front by :func:`collect_tables` and consumed by
position through ``ParseState.table_cursor``.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Sequence

from docx.image.image import Image as DocxImage

from .core.config import get_settings
from .document_models import Block, Document, ListItem, TableData, TextRun
from .image_fetcher import HttpxImageFetcher, ImageFetcher
from .inline_formatter import format_inline
from .node_emitter import MAX_HEADING_LEVEL, TEXT_COLOR, NodeEmitter, strip_pipes
from .style import ConversionOptions, StyleResolver
from .table_scanner import FENCE_MARKER, collect_tables, is_table_start

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(#+)\s+(.*)$")
_ORDERED_RE = re.compile(r"^\s*\d+\.\s")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BLOCKQUOTE_RE = re.compile(r"^>\s*")
_COMMENT_RE = re.compile(r"^COMMENT:\s*")

TOC_MARKER = "[TOC]"
PAGE_BREAK_MARKER = "\\pagebreak"
UNORDERED_MARKERS = ("- ", "* ")
BOLD_MARKER = "**"


@dataclass(slots=True)
class ParseState:
    """Mutable state of a single conversion call."""

    in_list: bool = False
    pending_list_items: list[ListItem] = field(default_factory=list)
    in_code_block: bool = False
    code_block_lines: list[str] = field(default_factory=list)
    code_block_language: str | None = None
    table_cursor: int = 0


def split_lines(markdown: str) -> list[str]:
    return markdown.replace("\r\n", "\n").split("\n")


def _bold_continuation(line: str) -> str | None:
    candidate = line.strip()
    if len(candidate) > 2 * len(BOLD_MARKER) and candidate.startswith(BOLD_MARKER) and candidate.endswith(BOLD_MARKER):
        return candidate.replace(BOLD_MARKER, "").strip() or None
    return None


class MarkdownParser:
    """Turn markdown text into a :class:`Document`.

    The parser itself holds no per-call state, so one instance may serve
    concurrent conversions.
    """

    def __init__(self, emitter: NodeEmitter, image_fetcher: ImageFetcher) -> None:
        self.emitter = emitter
        self.image_fetcher = image_fetcher

    async def parse(self, markdown: str) -> Document:
        lines = split_lines(markdown)
        tables = collect_tables(lines)
        state = ParseState()
        blocks: list[Block] = []

        index = 0
        while index < len(lines):
            try:
                index = await self._process_line(lines, index, tables, state, blocks)
            except Exception as exc:
                logger.warning(
                    "Failed to process line %s: %s. Skipping line.",
                    index + 1,
                    exc,
                    exc_info=True,
                )
                index += 1

        self._finish(state, blocks)
        logger.debug("Parsed %s lines into %s blocks (%s tables)", len(lines), len(blocks), len(tables))
        return Document(blocks=tuple(blocks), document_type=self.emitter.document_type)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    async def _process_line(
        self,
        lines: Sequence[str],
        index: int,
        tables: Sequence[TableData],
        state: ParseState,
        blocks: list[Block],
    ) -> int:
        """Handle ``lines[index]`` and return the index of the next line."""

        raw = lines[index]
        line = raw.strip()

        if not line:
            if state.in_code_block:
                state.code_block_lines.append("")
                return index + 1
            self._flush_list(state, blocks)
            blocks.append(self.emitter.spacer())
            return index + 1

        if line.startswith(FENCE_MARKER):
            self._toggle_code_block(line, state, blocks)
            return index + 1

        if state.in_code_block:
            state.code_block_lines.append(raw.rstrip("\r"))
            return index + 1

        if line == TOC_MARKER:
            self._flush_list(state, blocks)
            blocks.append(self.emitter.table_of_contents())
            return index + 1

        if line == PAGE_BREAK_MARKER:
            self._flush_list(state, blocks)
            blocks.append(self.emitter.page_break())
            return index + 1

        heading = _HEADING_RE.match(line)
        if heading:
            level = len(heading.group(1))
            if level <= MAX_HEADING_LEVEL:
                self._flush_list(state, blocks)
                blocks.append(self.emitter.heading(level, heading.group(2).strip()))
                return index + 1
            logger.warning(
                "Heading level %s is not supported (line %s). Converting to regular paragraph.",
                level,
                index + 1,
            )
            self._flush_list(state, blocks)
            blocks.append(self._paragraph(line, index))
            return index + 1

        if is_table_start(lines, index):
            return self._handle_table(lines, index, tables, state, blocks)

        if line.startswith(UNORDERED_MARKERS):
            return self._handle_unordered_item(lines, index, state)

        if _ORDERED_RE.match(line):
            state.in_list = True
            text = _ORDERED_RE.sub("", line, count=1).strip()
            state.pending_list_items.append(self.emitter.list_item(text, ordered=True))
            return index + 1

        if line.startswith("> "):
            self._flush_list(state, blocks)
            blocks.append(self.emitter.blockquote(_BLOCKQUOTE_RE.sub("", line, count=1).strip()))
            return index + 1

        if line.startswith("COMMENT:"):
            self._flush_list(state, blocks)
            blocks.append(self.emitter.comment(_COMMENT_RE.sub("", line, count=1).strip()))
            return index + 1

        image = _IMAGE_RE.search(line)
        if image:
            blocks.append(await self._load_image(image.group(1), image.group(2).strip()))
            return index + 1

        link = _LINK_RE.search(line)
        if link and "![" not in line:
            self._flush_list(state, blocks)
            blocks.append(
                self.emitter.link(
                    link.group(1),
                    link.group(2).strip(),
                    before=line[: link.start()],
                    after=line[link.end():],
                )
            )
            return index + 1

        if state.in_list:
            self._continue_list_item(line, state)
            return index + 1

        blocks.append(self._paragraph(line, index))
        return index + 1

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    def _toggle_code_block(self, line: str, state: ParseState, blocks: list[Block]) -> None:
        if not state.in_code_block:
            self._flush_list(state, blocks)
            state.in_code_block = True
            state.code_block_language = line[len(FENCE_MARKER):].strip() or None
            state.code_block_lines = []
            return

        blocks.append(self.emitter.code_block(state.code_block_lines, state.code_block_language))
        state.in_code_block = False
        state.code_block_lines = []
        state.code_block_language = None

    def _handle_table(
        self,
        lines: Sequence[str],
        index: int,
        tables: Sequence[TableData],
        state: ParseState,
        blocks: list[Block],
    ) -> int:
        self._flush_list(state, blocks)

        if state.table_cursor >= len(tables):
            logger.warning("No pre-scanned table left for line %s. Converting to regular text.", index + 1)
            blocks.append(self.emitter.plain_paragraph(strip_pipes(lines[index])))
            return index + 1

        table = tables[state.table_cursor]
        state.table_cursor += 1
        next_index = index + table.line_count

        try:
            blocks.append(self.emitter.table(table))
        except ValueError as exc:
            logger.warning(
                "Failed to process table at line %s: %s. Converting to regular text.",
                index + 1,
                exc,
            )
            block_lines = [lines[index], *lines[index + 2:next_index]]
            blocks.extend(self.emitter.table_fallback(block_lines))
        return next_index

    def _handle_unordered_item(self, lines: Sequence[str], index: int, state: ParseState) -> int:
        state.in_list = True
        text = lines[index].strip()[2:].strip()

        bold_tail = None
        next_index = index + 1
        if next_index < len(lines):
            bold_tail = _bold_continuation(lines[next_index])
            if bold_tail is not None:
                next_index += 1

        state.pending_list_items.append(self.emitter.list_item(text, bold_tail=bold_tail))
        return next_index

    def _continue_list_item(self, line: str, state: ParseState) -> None:
        if not state.pending_list_items:
            state.pending_list_items.append(self.emitter.list_item(line))
            return
        last = state.pending_list_items[-1]
        state.pending_list_items[-1] = self.emitter.extend_list_item(last, line)

    async def _load_image(self, alt_text: str, url: str) -> Block:
        logger.info("Found image in markdown: %s", url)
        try:
            payload = await self.image_fetcher.fetch(url)
            DocxImage.from_blob(payload)
        except Exception as exc:
            logger.error("Error in image processing for %s: %s", url, exc)
            return self.emitter.image_placeholder(alt_text)
        logger.info("Successfully processed image %s (%s bytes)", url, len(payload))
        return self.emitter.image(alt_text, url, payload)

    def _paragraph(self, line: str, index: int) -> Block:
        try:
            runs = format_inline(line)
        except Exception:
            logger.warning(
                "Failed to process text formatting at line %s. Using plain text.",
                index + 1,
                exc_info=True,
            )
            runs = [TextRun(text=line, color=TEXT_COLOR)]
        return self.emitter.paragraph(runs)

    # ------------------------------------------------------------------
    # Flushing
    # ------------------------------------------------------------------
    @staticmethod
    def _flush_list(state: ParseState, blocks: list[Block]) -> None:
        if state.pending_list_items:
            blocks.extend(state.pending_list_items)
            state.pending_list_items = []
        state.in_list = False

    def _finish(self, state: ParseState, blocks: list[Block]) -> None:
        if state.in_code_block and any(line.strip() for line in state.code_block_lines):
            blocks.append(self.emitter.code_block(state.code_block_lines, state.code_block_language))
        if state.in_list:
            self._flush_list(state, blocks)


def build_parser(
    options: ConversionOptions | None = None,
    *,
    image_fetcher: ImageFetcher | None = None,
) -> MarkdownParser:
    """Create a parser wired to the configured style and image fetcher."""

    options = options or ConversionOptions()
    settings = get_settings()
    resolver = StyleResolver(options.style, options.document_type)
    emitter = NodeEmitter(
        resolver,
        image_width_px=settings.image_width_px,
        image_height_px=settings.image_height_px,
    )
    fetcher = image_fetcher or HttpxImageFetcher.from_settings(settings)
    return MarkdownParser(emitter, fetcher)


async def parse_markdown(
    markdown: str,
    options: ConversionOptions | None = None,
    *,
    image_fetcher: ImageFetcher | None = None,
) -> Document:
    """Parse ``markdown`` into an ordered, immutable sequence of block nodes."""

    parser = build_parser(options, image_fetcher=image_fetcher)
    return await parser.parse(markdown)


__all__ = ["MarkdownParser", "ParseState", "build_parser", "parse_markdown", "split_lines"]
