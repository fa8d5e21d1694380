"""Handlers for sort_data, filter_data and create_chart."""

from __future__ import annotations

from gridwise.commands.handlers._support import column_offset, offset_letter
from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.session.models import Operation, OperationType
from gridwise.workbook.protocol import (
    ChartType,
    FilterCriteria,
    SortOptions,
    SpreadsheetCollaborator,
)


class SortDataCommand:
    """Deterministic `sort_data` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Sort range rows by one column.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope with one `sort` operation.
        """
        ref = command.parameters["range"]
        raw = command.parameters.get("options") or {}
        options = SortOptions(
            column=column_offset(ref, raw.get("column")),
            ascending=bool(raw.get("ascending", True)),
        )
        workbook.sort_range(ref, options)
        direction = "ascending" if options.ascending else "descending"
        letter = offset_letter(ref, options.column)
        return AIResponse.ok(
            f"Sorted data in {ref} by column {letter} ({direction})",
            operations=[
                Operation(
                    type=OperationType.SORT,
                    target=ref,
                    value=options.model_dump(mode="json"),
                )
            ],
            code="data_sorted",
        )


class FilterDataCommand:
    """Deterministic `filter_data` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Hide range rows that fail the filter criteria.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope with one `filter` operation.
        """
        ref = command.parameters["range"]
        raw = dict(command.parameters["criteria"])
        raw["column"] = column_offset(ref, raw.get("column"))
        criteria = FilterCriteria.model_validate(raw)
        visible = workbook.filter_range(ref, criteria)
        return AIResponse.ok(
            f"Filtered data in {ref}: {visible} row(s) match",
            operations=[
                Operation(
                    type=OperationType.FILTER,
                    target=ref,
                    value=criteria.model_dump(mode="json"),
                )
            ],
            code="data_filtered",
        )


class CreateChartCommand:
    """Deterministic `create_chart` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Ask the collaborator for a chart over a range.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope whose operation carries the new chart id.
        """
        ref = command.parameters["range"]
        chart_type = ChartType(command.parameters["type"])
        chart_id = workbook.create_chart(ref, chart_type)
        return AIResponse.ok(
            f"Created {chart_type.value} chart from {ref} (id: {chart_id})",
            operations=[
                Operation(type=OperationType.CREATE_CHART, target=ref, value=chart_id)
            ],
            code="chart_created",
        )
