"""Handler for format_cells."""

from __future__ import annotations

from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.session.models import Operation, OperationType
from gridwise.workbook.protocol import CellFormat, SpreadsheetCollaborator


class FormatCellsCommand:
    """Deterministic `format_cells` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Apply a structural format to every cell of a range.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope with one `set_style` operation.
        """
        ref = command.parameters["range"]
        fmt = CellFormat.model_validate(command.parameters["format"])
        workbook.apply_format(ref, fmt)
        applied = fmt.model_dump(exclude_none=True)
        summary = ", ".join(f"{key}={value}" for key, value in applied.items())
        return AIResponse.ok(
            f"Applied formatting to {ref} ({summary})",
            operations=[Operation(type=OperationType.SET_STYLE, target=ref, value=applied)],
            code="format_applied",
        )
