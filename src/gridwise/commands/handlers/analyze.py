"""Handler for analyze_data."""

from __future__ import annotations

from gridwise.analysis import DataAnalysis, analyze_values
from gridwise.commands.handlers._support import display_value
from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.workbook.protocol import SpreadsheetCollaborator


def render_analysis(analysis: DataAnalysis) -> str:
    """Render an analysis as the plain-text report returned to callers."""
    lines = [
        f"Data Analysis for {analysis.range}:",
        f"- Dimensions: {analysis.row_count} rows x {analysis.column_count} columns",
    ]
    summary = analysis.summary
    if summary.count:
        lines += ["", "Statistics:", f"- Count: {summary.count}"]
        lines.append(f"- Sum: {_number(summary.sum)}")
        lines.append(f"- Mean: {summary.mean:.2f}")
        lines.append(f"- Median: {_number(summary.median)}")
        if summary.mode is not None:
            lines.append(f"- Mode: {_number(summary.mode)}")
        lines.append(f"- Min: {_number(summary.min)}")
        lines.append(f"- Max: {_number(summary.max)}")
    if analysis.data_types:
        lines += ["", "Data Types:"]
        lines += [f"- {column}: {kind}" for column, kind in analysis.data_types.items()]
    if analysis.patterns:
        lines += ["", "Patterns:"]
        lines += [f"- {pattern}" for pattern in analysis.patterns]
    if analysis.suggestions:
        lines += ["", "Suggestions:"]
        lines += [f"- {suggestion}" for suggestion in analysis.suggestions]
    return "\n".join(lines)


def _number(value: float | None) -> str:
    if value is not None and value.is_integer():
        return str(int(value))
    return display_value(value)


class AnalyzeDataCommand:
    """Deterministic `analyze_data` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Read a range and report statistics, types, patterns and hints.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Read-only success envelope.
        """
        ref = command.parameters["range"]
        analysis = analyze_values(ref, workbook.get_range(ref).values)
        return AIResponse.ok(render_analysis(analysis), code="data_analyzed")
