"""Handlers for write_cell, write_range and set_formula."""

from __future__ import annotations

import logging

from gridwise.commands.handlers._support import display_value
from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.session.models import Operation, OperationType
from gridwise.workbook.protocol import SpreadsheetCollaborator

_LOGGER = logging.getLogger(__name__)


class WriteCellCommand:
    """Deterministic `write_cell` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Write one value into one cell.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope with one `set_value` operation.
        """
        cell = command.parameters["cell"]
        value = command.parameters["value"]
        workbook.set_cell(cell, value)
        _LOGGER.info("write.cell target=%s", cell)
        return AIResponse.ok(
            f"Set {cell} to {display_value(value)}",
            operations=[Operation(type=OperationType.SET_VALUE, target=cell, value=value)],
            code="cell_written",
        )


class WriteRangeCommand:
    """Deterministic `write_range` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Write a 2D grid anchored at the range's top-left cell.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope with one `set_value` operation for the range.
        """
        ref = command.parameters["range"]
        values = command.parameters["values"]
        workbook.set_range(ref, values)
        _LOGGER.info("write.range target=%s rows=%d", ref, len(values))
        return AIResponse.ok(
            f"Wrote data to {ref}",
            operations=[Operation(type=OperationType.SET_VALUE, target=ref, value=values)],
            code="range_written",
        )


class SetFormulaCommand:
    """Deterministic `set_formula` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        cell = command.parameters["cell"]
        formula = command.parameters["formula"]
        workbook.set_formula(cell, formula)
        _LOGGER.info("write.formula target=%s", cell)
        return AIResponse.ok(
            f"Set formula {formula} in {cell}",
            operations=[
                Operation(type=OperationType.SET_FORMULA, target=cell, value=formula)
            ],
            code="formula_set",
        )
