"""Unit tests for the dict-backed spreadsheet collaborator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from gridwise.errors import ErrorCode, WorkbookError
from gridwise.workbook import (
    CellFormat,
    ChartType,
    FilterCriteria,
    FilterOperator,
    FindOptions,
    InMemoryWorkbook,
    SortOptions,
)


@pytest.mark.unit
def test_cells_round_trip_and_clear() -> None:
    """Set/get works on uppercase keys; empty values clear cells."""
    book = InMemoryWorkbook()

    book.set_cell("a1", 5)
    assert book.get_cell("A1").value == 5

    book.set_cell("A1", "")
    assert book.get_cell("A1").value is None
    assert "A1" not in book.values


@pytest.mark.unit
def test_formula_strings_in_seed_become_formulas() -> None:
    """Seed values starting with '=' are stored as formulas."""
    book = InMemoryWorkbook({"A1": 1, "A2": "=A1*2"})

    cell = book.get_cell("A2")
    assert cell.value is None
    assert cell.formula == "=A1*2"


@pytest.mark.unit
def test_invalid_references_raise_workbook_error() -> None:
    """Malformed references are rejected with the workbook error code."""
    book = InMemoryWorkbook()

    with pytest.raises(WorkbookError) as exc_info:
        book.get_cell("1A")
    assert exc_info.value.code is ErrorCode.WORKBOOK_ERROR

    with pytest.raises(WorkbookError):
        book.get_range("A0:B2")


@pytest.mark.unit
def test_get_range_reports_formulas_only_when_present(
    workbook: InMemoryWorkbook,
) -> None:
    """The formulas grid is omitted when the range has no formulas."""
    plain = workbook.get_range("A1:B2")
    workbook.set_formula("B2", "SUM(B3:B5)")
    mixed = workbook.get_range("A1:B2")

    assert plain.values == [["Region", "Sales"], ["North", 120]]
    assert plain.formulas is None
    assert mixed.formulas == [[None, None], [None, "=SUM(B3:B5)"]]


@pytest.mark.unit
def test_apply_format_merges_with_existing(workbook: InMemoryWorkbook) -> None:
    """Formats merge field by field rather than replacing."""
    workbook.apply_format("A1", CellFormat(bold=True))
    workbook.apply_format("A1", CellFormat(font_color="#FF0000"))

    formatting = workbook.get_cell("A1").formatting
    assert formatting is not None
    assert formatting.bold is True
    assert formatting.font_color == "#FF0000"


@pytest.mark.unit
def test_find_all_is_row_major_with_positions(workbook: InMemoryWorkbook) -> None:
    """Matches come back row by row with 1-based rows and 0-based columns."""
    matches = workbook.find_all("o", FindOptions())

    assert [match.cell for match in matches] == [
        "A1",
        "C1",
        "A2",
        "C2",
        "A3",
        "C3",
        "C5",
    ]
    assert (matches[1].row, matches[1].column) == (1, 2)


@pytest.mark.unit
def test_find_all_respects_options(workbook: InMemoryWorkbook) -> None:
    """Case, whole-cell and range options narrow the search."""
    cased = workbook.find_all("OLD", FindOptions(match_case=True))
    whole = workbook.find_all("old", FindOptions(match_entire_cell=True))
    scoped = workbook.find_all("old", FindOptions(range="C3:C5"))

    assert [match.cell for match in cased] == ["C5"]
    assert [match.cell for match in whole] == ["C2", "C5"]
    assert [match.cell for match in scoped] == ["C3", "C5"]
    assert workbook.find_all("", FindOptions()) == []


@pytest.mark.unit
def test_sort_range_keeps_blanks_last() -> None:
    """Blank sort keys stay at the bottom in either direction."""
    book = InMemoryWorkbook({"A1": 3, "A3": 1, "A4": 2})

    book.sort_range("A1:A4", SortOptions(ascending=False))

    assert book.get_range("A1:A4").values == [[3], [2], [1], [None]]


@pytest.mark.unit
def test_sort_range_rejects_column_outside_range(workbook: InMemoryWorkbook) -> None:
    """Sort columns are offsets and must fall inside the range."""
    with pytest.raises(WorkbookError, match="outside"):
        workbook.sort_range("A1:B5", SortOptions(column=2))


@pytest.mark.unit
def test_sort_range_moves_formulas_and_formats_with_rows() -> None:
    """Formulas and formats travel with their row instead of being dropped."""
    # Arrange - formula and bold cells on the row that sorts last
    book = InMemoryWorkbook({"A1": 2, "B1": "=A1*2", "A2": 1, "B2": "=A2*2"})
    book.apply_format("A1:A1", CellFormat(bold=True))

    # Act - sort ascending by column A
    book.sort_range("A1:B2", SortOptions(column=0))

    # Assert - row 1 moved to row 2 with its formula and format
    assert book.get_range("A1:A2").values == [[1], [2]]
    assert book.formulas == {"B1": "=A2*2", "B2": "=A1*2"}
    assert "A1" not in book.formats
    assert book.formats["A2"].bold is True


@pytest.mark.unit
def test_hidden_rows_follow_row_shifts(workbook: InMemoryWorkbook) -> None:
    """Filtered rows stay hidden after rows are inserted or deleted."""
    workbook.filter_range(
        "A2:C5",
        FilterCriteria(column=0, operator=FilterOperator.EQUALS, value="North"),
    )
    assert workbook.hidden_rows == {3, 4, 5}

    workbook.insert_row(1)
    assert workbook.hidden_rows == {4, 5, 6}

    workbook.delete_row(5)
    assert workbook.hidden_rows == {4, 5}

    workbook.insert_column(0)
    assert workbook.hidden_rows == {4, 5}


@pytest.mark.unit
def test_filter_range_hides_failing_rows(workbook: InMemoryWorkbook) -> None:
    """Rows failing the criteria are hidden; matches are counted."""
    visible = workbook.filter_range(
        "A2:C5",
        FilterCriteria(column=2, operator=FilterOperator.CONTAINS, value="old"),
    )

    assert visible == 3
    assert workbook.hidden_rows == {4}


@pytest.mark.unit
def test_filter_numeric_comparison_skips_text(workbook: InMemoryWorkbook) -> None:
    """Numeric operators treat non-numeric cells as failing."""
    visible = workbook.filter_range(
        "B1:B5",
        FilterCriteria(column=0, operator=FilterOperator.LESS_THAN, value=100),
    )

    assert visible == 2
    assert workbook.hidden_rows == {1, 2, 4}


@pytest.mark.unit
def test_charts_get_sequential_ids(workbook: InMemoryWorkbook) -> None:
    """Each chart receives the next id."""
    first = workbook.create_chart("A1:B5", ChartType.LINE)
    second = workbook.create_chart("a1:b3", ChartType.PIE)

    assert (first, second) == ("chart-1", "chart-2")
    assert workbook.charts["chart-2"].data_range == "A1:B3"


@pytest.mark.unit
def test_structure_changes_move_comments(workbook: InMemoryWorkbook) -> None:
    """Row and column shifts carry comments along; deleted cells drop them."""
    kept = workbook.add_comment("B3", "keep")
    dropped = workbook.add_comment("A2", "drop")

    workbook.insert_column(0)
    workbook.delete_row(2)

    comments = {comment.id: comment for comment in workbook.list_comments()}
    assert dropped not in comments
    assert comments[kept].cell == "C2"
    assert workbook.values["C2"] == 80


@pytest.mark.unit
def test_structure_rejects_invalid_positions() -> None:
    """Rows start at 1 and columns at 0."""
    book = InMemoryWorkbook()

    with pytest.raises(WorkbookError):
        book.insert_row(0)
    with pytest.raises(WorkbookError):
        book.delete_column(-1)


@pytest.mark.unit
def test_comment_threads(workbook: InMemoryWorkbook) -> None:
    """Comments support replies, resolution and deletion."""
    comment_id = workbook.add_comment("a1", "check")
    workbook.reply_comment(comment_id, "looks fine")
    workbook.resolve_comment(comment_id)

    record = workbook.list_comments()[0]
    assert record.cell == "A1"
    assert record.resolved is True
    assert record.replies == ["looks fine"]

    workbook.delete_comment(comment_id)
    assert workbook.list_comments() == []
    with pytest.raises(WorkbookError, match="not found"):
        workbook.delete_comment(comment_id)


@pytest.mark.unit
def test_worksheet_metadata(workbook: InMemoryWorkbook) -> None:
    """Metadata reports the used range and formula presence."""
    metadata = workbook.get_worksheet_metadata()

    assert metadata.name == "Sheet1"
    assert metadata.row_count == 5
    assert metadata.column_count == 3
    assert metadata.has_formulas is False
    assert metadata.data_ranges == ["A1:C5"]
    assert InMemoryWorkbook().get_worksheet_metadata().data_ranges == []


@pytest.mark.unit
def test_from_file_reads_flat_and_named_payloads(tmp_path: Path) -> None:
    """Workbook files may be flat mappings or carry a name and cells."""
    flat = tmp_path / "flat.yaml"
    flat.write_text("A1: 1\nB1: hello\n", encoding="utf-8")
    named = tmp_path / "named.json"
    named.write_text(
        json.dumps({"name": "Budget", "cells": {"A1": "=1+1"}}), encoding="utf-8"
    )

    flat_book = InMemoryWorkbook.from_file(flat)
    named_book = InMemoryWorkbook.from_file(named)

    assert flat_book.values == {"A1": 1, "B1": "hello"}
    assert named_book.name == "Budget"
    assert named_book.formulas == {"A1": "=1+1"}


@pytest.mark.unit
def test_from_file_wraps_decode_errors(tmp_path: Path) -> None:
    """Undecodable files surface as workbook errors."""
    broken = tmp_path / "broken.json"
    broken.write_text("{", encoding="utf-8")

    with pytest.raises(WorkbookError, match="Invalid JSON"):
        InMemoryWorkbook.from_file(broken)
