"""Shared helpers for spreadsheet command handlers."""

from __future__ import annotations

from typing import Any

from gridwise.commands.normalize import column_number_to_letter, range_columns
from gridwise.workbook.protocol import CellData, CellValueType


def display_value(value: Any) -> str:
    """Render a cell value for response messages."""
    if value is None:
        return "empty"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def cell_value_type(data: CellData) -> CellValueType:
    """Classify cell content; a formula wins over its cached value."""
    if data.formula:
        return CellValueType.FORMULA
    if data.value is None:
        return CellValueType.NULL
    if isinstance(data.value, bool):
        return CellValueType.BOOLEAN
    if isinstance(data.value, int | float):
        return CellValueType.NUMBER
    return CellValueType.STRING


def _first_column(ref: str) -> int:
    columns = range_columns(ref)
    if columns is None:
        raise ValueError(f"Invalid range reference: {ref}")
    return columns[0]


def column_offset(ref: str, column: int | None) -> int:
    """Translate a sheet column index into an offset within `ref`.

    No column addresses the range's first column.

    Raises:
        ValueError: If `column` lies left of the range.
    """
    if column is None:
        return 0
    first_column = _first_column(ref)
    if column < first_column:
        raise ValueError(
            f"Column {column_number_to_letter(column)} is outside {ref}"
        )
    return column - first_column


def offset_letter(ref: str, offset: int) -> str:
    """Return the sheet column letter for an offset within `ref`."""
    return column_number_to_letter(_first_column(ref) + offset)
