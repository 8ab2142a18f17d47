"""Tests for the up-front table scan."""

from __future__ import annotations

from markdown_docx.markdown_parser import split_lines
from markdown_docx.table_scanner import collect_tables, is_table_start, split_cells


def test_split_cells_drops_outer_pipes() -> None:
    assert split_cells("| Name | Qty |") == ["Name", "Qty"]


def test_is_table_start_requires_separator() -> None:
    lines = ["| A | B |", "just text"]
    assert is_table_start(lines, 0) is False
    assert is_table_start(["| A | B |", "|---|---|"], 0) is True
    assert is_table_start(["| A | B |"], 0) is False


def test_collects_tables_in_source_order() -> None:
    lines = split_lines(
        "| A | B |\n|---|---|\n| 1 | 2 |\n| 3 | 4 |\n\ntext\n\n| C |\n|---|\n| 5 |"
    )

    tables = collect_tables(lines)

    assert [table.headers for table in tables] == [["A", "B"], ["C"]]
    assert tables[0].rows == [["1", "2"], ["3", "4"]]
    assert tables[0].line_count == 4
    assert tables[1].rows == [["5"]]


def test_tables_inside_code_fences_are_ignored() -> None:
    lines = split_lines("```\n| X | Y |\n|---|---|\n```\n| A |\n|---|\n| 1 |")

    tables = collect_tables(lines)

    assert len(tables) == 1
    assert tables[0].headers == ["A"]


def test_malformed_table_is_still_collected() -> None:
    tables = collect_tables(["| A | B |", "|---|---|", "| 1 |"])

    assert len(tables) == 1
    assert tables[0].is_well_formed is False
    assert tables[0].line_count == 3


def test_header_without_separator_is_not_a_table() -> None:
    assert collect_tables(["| A | B |", "| 1 | 2 |"]) == []
