"""Descriptive statistics over a range of cell values."""

from __future__ import annotations

import math
from collections import Counter
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

LARGE_RANGE_ROWS = 10


class DataSummary(BaseModel):
    """Summary statistics over the numeric cells of a range."""

    model_config = ConfigDict(extra="forbid")

    count: int | None = None
    sum: float | None = None
    mean: float | None = None
    median: float | None = None
    mode: float | None = None
    min: float | None = None
    max: float | None = None


class DataAnalysis(BaseModel):
    """Statistics, column types, patterns and follow-up hints for a range."""

    model_config = ConfigDict(extra="forbid")

    range: str
    row_count: int
    column_count: int
    summary: DataSummary = Field(default_factory=DataSummary)
    data_types: dict[str, str] = Field(default_factory=dict)
    patterns: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return not math.isnan(value)


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def _summarize(numbers: list[float]) -> DataSummary:
    if not numbers:
        return DataSummary()
    total = sum(numbers)
    ordered = sorted(numbers)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        median = (ordered[middle - 1] + ordered[middle]) / 2
    else:
        median = ordered[middle]
    # First value to reach the highest frequency wins; unique values have no mode.
    frequency = Counter(numbers)
    top = max(frequency.values())
    mode = next(value for value in numbers if frequency[value] == top) if top > 1 else None
    return DataSummary(
        count=len(numbers),
        sum=total,
        mean=total / len(numbers),
        median=median,
        mode=mode,
        min=ordered[0],
        max=ordered[-1],
    )


def _column_type(values: list[Any]) -> str:
    present = [value for value in values if value is not None]
    if not present:
        return "mixed"
    kinds = {
        "boolean" if isinstance(value, bool)
        else "number" if _is_number(value)
        else "string"
        for value in present
    }
    return kinds.pop() if len(kinds) == 1 else "mixed"


def analyze_values(ref: str, values: list[list[Any]]) -> DataAnalysis:
    """Analyze a row-major grid of values read from `ref`.

    Args:
        ref: Range the values were read from.
        values: Row-major cell values.

    Returns:
        Analysis with summary statistics over every numeric cell, one data
        type per column (`Column 1`, `Column 2`, ...), detected patterns and
        suggestions.
    """
    flat = [value for row in values for value in row]
    numbers = [float(value) for value in flat if _is_number(value)]
    column_count = len(values[0]) if values else 0

    data_types = {
        f"Column {index + 1}": _column_type(
            [row[index] if index < len(row) else None for row in values]
        )
        for index in range(column_count)
    }

    patterns: list[str] = []
    empty = sum(1 for value in flat if _is_empty(value))
    if empty:
        patterns.append(f"Contains {empty} empty cells")
    if numbers and all(number > 0 for number in numbers):
        patterns.append("All numeric values are positive")
    if numbers and all(number < 0 for number in numbers):
        patterns.append("All numeric values are negative")

    suggestions: list[str] = []
    if numbers:
        suggestions.append("Consider using SUM, AVERAGE, or statistical formulas")
        if column_count > 1:
            suggestions.append("Data suitable for chart visualization")
    if len(values) > LARGE_RANGE_ROWS:
        suggestions.append("Consider using filters or sorting for better data management")

    return DataAnalysis(
        range=ref,
        row_count=len(values),
        column_count=column_count,
        summary=_summarize(numbers),
        data_types=data_types,
        patterns=patterns,
        suggestions=suggestions,
    )
