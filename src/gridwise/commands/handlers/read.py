"""Handlers for read_cell and read_range."""

from __future__ import annotations

from gridwise.commands.handlers._support import cell_value_type, display_value
from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.workbook.protocol import SpreadsheetCollaborator

DEFAULT_PREVIEW_ROWS = 3


class ReadCellCommand:
    """Deterministic `read_cell` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Summarize one cell's value, type, formula and formatting.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Read-only success envelope.
        """
        cell = command.parameters["cell"]
        data = workbook.get_cell(cell)
        lines = [
            f"Cell {cell}:",
            f"- Value: {display_value(data.value)}",
            f"- Type: {cell_value_type(data).value}",
        ]
        if data.formula:
            lines.append(f"- Formula: {data.formula}")
        if data.formatting is not None:
            formatting = ", ".join(
                f"{key}: {value}"
                for key, value in data.formatting.model_dump(exclude_none=True).items()
            )
            if formatting:
                lines.append(f"- Formatting: {formatting}")
        return AIResponse.ok("\n".join(lines), code="cell_read")


class ReadRangeCommand:
    """Deterministic `read_range` handler."""

    def __init__(self, *, preview_rows: int = DEFAULT_PREVIEW_ROWS) -> None:
        """Construct handler.

        Args:
            preview_rows: Number of sample rows included in the message.
        """
        self._preview_rows = preview_rows

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Summarize range dimensions, sample rows and formula count.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Read-only success envelope.
        """
        ref = command.parameters["range"]
        data = workbook.get_range(ref)
        rows = data.values
        row_count = len(rows)
        column_count = len(rows[0]) if rows else 0
        lines = [
            f"Range {ref}:",
            f"- Dimensions: {row_count} rows x {column_count} columns",
            f"- Total cells: {row_count * column_count}",
        ]
        if rows:
            shown = rows[: self._preview_rows]
            lines.append(f"- Sample data (first {len(shown)} rows):")
            for index, row in enumerate(shown, start=1):
                lines.append(f"  Row {index}: {', '.join(display_value(v) for v in row)}")
            if row_count > len(shown):
                lines.append(f"  ... and {row_count - len(shown)} more rows")
        formula_count = sum(
            1 for row in data.formulas or [] for formula in row if formula
        )
        if formula_count:
            lines.append(f"- Contains {formula_count} formula(s)")
        return AIResponse.ok("\n".join(lines), code="range_read")
