"""Handlers for row and column insertion and deletion."""

from __future__ import annotations

import logging

from gridwise.commands.normalize import column_number_to_letter
from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.session.models import Operation, OperationType
from gridwise.workbook.protocol import SpreadsheetCollaborator

_LOGGER = logging.getLogger(__name__)


class InsertRowCommand:
    """Deterministic `insert_row` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        row = command.parameters["row"]
        workbook.insert_row(row)
        _LOGGER.info("structure.insert_row row=%d", row)
        return AIResponse.ok(
            f"Inserted row at {row}",
            operations=[Operation(type=OperationType.INSERT_ROW, target=f"{row}:{row}")],
            code="row_inserted",
        )


class DeleteRowCommand:
    """Deterministic `delete_row` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Delete one 1-based row and shift later rows up.

        Args:
            command: Validated, confirmed parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope flagged as confirmation-gated.
        """
        row = command.parameters["row"]
        workbook.delete_row(row)
        _LOGGER.info("structure.delete_row row=%d", row)
        return AIResponse.ok(
            f"Deleted row {row}",
            operations=[Operation(type=OperationType.DELETE_ROW, target=f"{row}:{row}")],
            requires_confirmation=True,
            code="row_deleted",
        )


class InsertColumnCommand:
    """Deterministic `insert_column` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        column = command.parameters["column"]
        letter = column_number_to_letter(column)
        workbook.insert_column(column)
        _LOGGER.info("structure.insert_column column=%s", letter)
        return AIResponse.ok(
            f"Inserted column at {letter}",
            operations=[
                Operation(type=OperationType.INSERT_COLUMN, target=f"{letter}:{letter}")
            ],
            code="column_inserted",
        )


class DeleteColumnCommand:
    """Deterministic `delete_column` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Delete one 0-based column and shift later columns left.

        Args:
            command: Validated, confirmed parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope flagged as confirmation-gated.
        """
        column = command.parameters["column"]
        letter = column_number_to_letter(column)
        workbook.delete_column(column)
        _LOGGER.info("structure.delete_column column=%s", letter)
        return AIResponse.ok(
            f"Deleted column {letter}",
            operations=[
                Operation(type=OperationType.DELETE_COLUMN, target=f"{letter}:{letter}")
            ],
            requires_confirmation=True,
            code="column_deleted",
        )
