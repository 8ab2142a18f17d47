"""Up-front scan that locates pipe tables before the main parsing pass."""
from __future__ import annotations

from typing import Sequence

from .document_models import TableData

FENCE_MARKER = "```"
SEPARATOR_MARKER = "|-"


def split_cells(line: str) -> list[str]:
    """Split a pipe row into trimmed cells, dropping empty tokens."""

    return [token.strip() for token in line.strip().split("|") if token]


def is_table_start(lines: Sequence[str], index: int) -> bool:
    """Return True when ``lines[index]`` is a header row followed by a separator."""

    line = lines[index].strip()
    if not (line.startswith("|") and line.endswith("|")):
        return False
    return index + 1 < len(lines) and SEPARATOR_MARKER in lines[index + 1]


def _read_table(lines: Sequence[str], index: int) -> TableData:
    headers = split_cells(lines[index])
    rows: list[list[str]] = []
    cursor = index + 2
    while cursor < len(lines) and lines[cursor].strip().startswith("|"):
        rows.append(split_cells(lines[cursor]))
        cursor += 1
    return TableData(headers=headers, rows=rows)


def collect_tables(lines: Sequence[str]) -> list[TableData]:
    """Return every table block in source order.

    The walk follows the main pass: fenced code is skipped and scanning
    resumes after the last consumed row, so the n-th table found here is the
    n-th table marker the parser meets.
    """

    tables: list[TableData] = []
    in_code_block = False
    index = 0
    while index < len(lines):
        stripped = lines[index].strip()
        if stripped.startswith(FENCE_MARKER):
            in_code_block = not in_code_block
            index += 1
            continue
        if not in_code_block and is_table_start(lines, index):
            table = _read_table(lines, index)
            tables.append(table)
            index += table.line_count
            continue
        index += 1
    return tables


__all__ = ["collect_tables", "is_table_start", "split_cells"]
