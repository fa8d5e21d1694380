"""Dict-backed spreadsheet collaborator for the CLI and tests."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gridwise.commands.normalize import (
    column_number_to_letter,
    is_valid_cell_reference,
    split_cell_reference,
)
from gridwise.config import ConfigError, decode_mapping_file
from gridwise.errors import WorkbookError
from gridwise.workbook.protocol import (
    CellData,
    CellFormat,
    ChartType,
    CommentRecord,
    FilterCriteria,
    FilterOperator,
    FindMatch,
    FindOptions,
    RangeData,
    SortOptions,
    WorksheetMetadata,
)

_LOGGER = logging.getLogger(__name__)

# Per-column (value, formula, format) of one row; rows move as a unit when sorted.
_RowCells = list[tuple[Any, str | None, CellFormat | None]]


@dataclass
class _Comment:
    id: str
    cell: str
    content: str
    resolved: bool = False
    replies: list[str] = field(default_factory=list)


@dataclass
class _Chart:
    id: str
    chart_type: ChartType
    data_range: str


@dataclass(frozen=True)
class _Bounds:
    first_column: int
    first_row: int
    last_column: int
    last_row: int

    def cells(self) -> Iterator[tuple[int, int, str]]:
        for row in range(self.first_row, self.last_row + 1):
            for column in range(self.first_column, self.last_column + 1):
                yield row, column, f"{column_number_to_letter(column)}{row}"

    def contains(self, column: int, row: int) -> bool:
        return (
            self.first_column <= column <= self.last_column
            and self.first_row <= row <= self.last_row
        )


def _bounds(ref: str) -> _Bounds:
    start, _, end = ref.upper().partition(":")
    try:
        start_column, start_row = split_cell_reference(start)
        end_column, end_row = split_cell_reference(end or start)
    except ValueError as exc:
        raise WorkbookError(str(exc), data={"ref": ref}) from exc
    if start_row < 1 or end_row < 1:
        raise WorkbookError(f"Row numbers start at 1: {ref}", data={"ref": ref})
    return _Bounds(
        first_column=min(start_column, end_column),
        first_row=min(start_row, end_row),
        last_column=max(start_column, end_column),
        last_row=max(start_row, end_row),
    )


def _cell(ref: str) -> str:
    upper = ref.upper()
    if not is_valid_cell_reference(upper):
        raise WorkbookError(f"Invalid cell reference: {ref}", data={"ref": ref})
    return upper


def _sort_key(value: Any, *, case_sensitive: bool) -> tuple[int, Any]:
    if isinstance(value, bool):
        return (1, str(value))
    if isinstance(value, int | float):
        return (0, value)
    text = str(value)
    return (1, text if case_sensitive else text.lower())


def _matches(value: Any, criteria: FilterCriteria) -> bool:
    expected = criteria.value
    if criteria.operator in {FilterOperator.CONTAINS, FilterOperator.NOT_CONTAINS}:
        found = str(expected).lower() in str(value).lower()
        return found if criteria.operator == FilterOperator.CONTAINS else not found
    if criteria.operator == FilterOperator.EQUALS:
        return value == expected or str(value).lower() == str(expected).lower()
    if criteria.operator == FilterOperator.NOT_EQUALS:
        return not (value == expected or str(value).lower() == str(expected).lower())
    try:
        left, right = float(value), float(expected)
    except (TypeError, ValueError):
        return False
    if criteria.operator == FilterOperator.GREATER_THAN:
        return left > right
    return left < right


class InMemoryWorkbook:
    """Single-worksheet spreadsheet held in plain dictionaries.

    Cells are keyed by uppercase A1 references. Formulas are stored but never
    evaluated; a formula cell reads back with its formula text and no value.
    """

    def __init__(
        self,
        cells: Mapping[str, Any] | None = None,
        *,
        name: str = "Sheet1",
    ) -> None:
        self.name = name
        self.values: dict[str, Any] = {}
        self.formulas: dict[str, str] = {}
        self.formats: dict[str, CellFormat] = {}
        self.hidden_rows: set[int] = set()
        self.charts: dict[str, _Chart] = {}
        self.comments: dict[str, _Comment] = {}
        self._chart_counter = 0
        self._comment_counter = 0
        for ref, value in (cells or {}).items():
            if isinstance(value, str) and value.startswith("="):
                self.set_formula(ref, value)
            else:
                self.set_cell(ref, value)

    @classmethod
    def from_file(cls, path: Path) -> InMemoryWorkbook:
        """Load a workbook from a YAML/JSON mapping.

        The file is either a flat `{cell: value}` mapping or
        `{"name": ..., "cells": {cell: value}}`.

        Raises:
            WorkbookError: If the file cannot be decoded.
        """
        try:
            payload = decode_mapping_file(path)
        except ConfigError as exc:
            raise WorkbookError(str(exc)) from exc
        if "cells" in payload:
            cells = payload.get("cells") or {}
            if not isinstance(cells, dict):
                raise WorkbookError("Workbook 'cells' must be a mapping")
            return cls(cells, name=str(payload.get("name", "Sheet1")))
        return cls(payload)

    def get_cell(self, ref: str) -> CellData:
        key = _cell(ref)
        return CellData(
            value=self.values.get(key),
            formula=self.formulas.get(key),
            formatting=self.formats.get(key),
        )

    def set_cell(self, ref: str, value: Any) -> None:
        key = _cell(ref)
        self.formulas.pop(key, None)
        if value is None or value == "":
            self.values.pop(key, None)
        else:
            self.values[key] = value

    def get_range(self, ref: str) -> RangeData:
        bounds = _bounds(ref)
        values: list[list[Any]] = []
        formulas: list[list[str | None]] = []
        for row in range(bounds.first_row, bounds.last_row + 1):
            row_values: list[Any] = []
            row_formulas: list[str | None] = []
            for column in range(bounds.first_column, bounds.last_column + 1):
                key = f"{column_number_to_letter(column)}{row}"
                row_values.append(self.values.get(key))
                row_formulas.append(self.formulas.get(key))
            values.append(row_values)
            formulas.append(row_formulas)
        has_formulas = any(f for row_formulas in formulas for f in row_formulas)
        return RangeData(values=values, formulas=formulas if has_formulas else None)

    def set_range(self, ref: str, values: list[list[Any]]) -> None:
        bounds = _bounds(ref)
        for row_offset, row_values in enumerate(values):
            for column_offset, value in enumerate(row_values):
                column = bounds.first_column + column_offset
                row = bounds.first_row + row_offset
                self.set_cell(f"{column_number_to_letter(column)}{row}", value)

    def set_formula(self, ref: str, formula: str) -> None:
        key = _cell(ref)
        self.values.pop(key, None)
        self.formulas[key] = formula if formula.startswith("=") else f"={formula}"

    def apply_format(self, ref: str, fmt: CellFormat) -> None:
        updates = fmt.model_dump(exclude_none=True)
        for _, _, key in _bounds(ref).cells():
            current = self.formats.get(key, CellFormat())
            self.formats[key] = current.model_copy(update=updates)

    def find_all(self, text: str, options: FindOptions) -> list[FindMatch]:
        if not text:
            return []
        scope = _bounds(options.range) if options.range else None
        flags = 0 if options.match_case else re.IGNORECASE
        needle = re.compile(
            rf"^{re.escape(text)}$" if options.match_entire_cell else re.escape(text),
            flags,
        )
        matches: list[FindMatch] = []
        for key in sorted(self.values, key=lambda k: split_cell_reference(k)[::-1]):
            column, row = split_cell_reference(key)
            if scope is not None and not scope.contains(column, row):
                continue
            value = self.values[key]
            if needle.search(str(value)):
                matches.append(FindMatch(cell=key, value=value, row=row, column=column))
        return matches

    def get_worksheet_metadata(self) -> WorksheetMetadata:
        occupied = [split_cell_reference(key) for key in (*self.values, *self.formulas)]
        if not occupied:
            return WorksheetMetadata(name=self.name)
        first_column = min(column for column, _ in occupied)
        last_column = max(column for column, _ in occupied)
        first_row = min(row for _, row in occupied)
        last_row = max(row for _, row in occupied)
        data_range = (
            f"{column_number_to_letter(first_column)}{first_row}:"
            f"{column_number_to_letter(last_column)}{last_row}"
        )
        return WorksheetMetadata(
            name=self.name,
            row_count=last_row,
            column_count=last_column + 1,
            has_formulas=bool(self.formulas),
            data_ranges=[data_range],
        )

    def sort_range(self, ref: str, options: SortOptions) -> None:
        bounds = _bounds(ref)
        width = bounds.last_column - bounds.first_column + 1
        if options.column >= width:
            raise WorkbookError(
                f"Sort column {options.column} is outside {ref}",
                data={"ref": ref, "column": options.column},
            )
        rows: list[_RowCells] = []
        for row in range(bounds.first_row, bounds.last_row + 1):
            cells = []
            for column in range(bounds.first_column, bounds.last_column + 1):
                key = f"{column_number_to_letter(column)}{row}"
                cells.append(
                    (
                        self.values.pop(key, None),
                        self.formulas.pop(key, None),
                        self.formats.pop(key, None),
                    )
                )
            rows.append(cells)

        def sort_value(cells: _RowCells) -> Any:
            value, formula, _ = cells[options.column]
            return formula if value is None else value

        blank = [cells for cells in rows if sort_value(cells) in (None, "")]
        filled = [cells for cells in rows if sort_value(cells) not in (None, "")]
        filled.sort(
            key=lambda cells: _sort_key(
                sort_value(cells), case_sensitive=options.case_sensitive
            ),
            reverse=not options.ascending,
        )
        for row_offset, cells in enumerate(filled + blank):
            for column_offset, (value, formula, fmt) in enumerate(cells):
                key = (
                    f"{column_number_to_letter(bounds.first_column + column_offset)}"
                    f"{bounds.first_row + row_offset}"
                )
                if value not in (None, ""):
                    self.values[key] = value
                if formula is not None:
                    self.formulas[key] = formula
                if fmt is not None:
                    self.formats[key] = fmt

    def filter_range(self, ref: str, criteria: FilterCriteria) -> int:
        bounds = _bounds(ref)
        width = bounds.last_column - bounds.first_column + 1
        if criteria.column >= width:
            raise WorkbookError(
                f"Filter column {criteria.column} is outside {ref}",
                data={"ref": ref, "column": criteria.column},
            )
        visible = 0
        for offset, row_values in enumerate(self.get_range(ref).values):
            row = bounds.first_row + offset
            if _matches(row_values[criteria.column], criteria):
                self.hidden_rows.discard(row)
                visible += 1
            else:
                self.hidden_rows.add(row)
        return visible

    def create_chart(self, ref: str, chart_type: ChartType) -> str:
        _bounds(ref)
        self._chart_counter += 1
        chart_id = f"chart-{self._chart_counter}"
        self.charts[chart_id] = _Chart(
            id=chart_id, chart_type=chart_type, data_range=ref.upper()
        )
        return chart_id

    def insert_row(self, row: int) -> None:
        if row < 1:
            raise WorkbookError(f"Row numbers start at 1, got {row}")
        self._shift(
            lambda column, r: (column, r + 1) if r >= row else (column, r),
            rows=lambda r: r + 1 if r >= row else r,
        )

    def delete_row(self, row: int) -> None:
        if row < 1:
            raise WorkbookError(f"Row numbers start at 1, got {row}")
        self._shift(
            lambda column, r: None
            if r == row
            else ((column, r - 1) if r > row else (column, r)),
            rows=lambda r: None if r == row else (r - 1 if r > row else r),
        )

    def insert_column(self, column: int) -> None:
        if column < 0:
            raise WorkbookError(f"Column index must be >= 0, got {column}")
        self._shift(lambda c, row: (c + 1, row) if c >= column else (c, row))

    def delete_column(self, column: int) -> None:
        if column < 0:
            raise WorkbookError(f"Column index must be >= 0, got {column}")
        self._shift(
            lambda c, row: None
            if c == column
            else ((c - 1, row) if c > column else (c, row))
        )

    def add_comment(self, ref: str, content: str) -> str:
        key = _cell(ref)
        self._comment_counter += 1
        comment_id = f"c{self._comment_counter}"
        self.comments[comment_id] = _Comment(id=comment_id, cell=key, content=content)
        return comment_id

    def reply_comment(self, comment_id: str, content: str) -> None:
        self._comment(comment_id).replies.append(content)

    def resolve_comment(self, comment_id: str) -> None:
        self._comment(comment_id).resolved = True

    def delete_comment(self, comment_id: str) -> None:
        self._comment(comment_id)
        del self.comments[comment_id]

    def list_comments(self) -> list[CommentRecord]:
        return [
            CommentRecord(
                id=comment.id,
                cell=comment.cell,
                content=comment.content,
                resolved=comment.resolved,
                replies=list(comment.replies),
            )
            for comment in self.comments.values()
        ]

    def _comment(self, comment_id: str) -> _Comment:
        comment = self.comments.get(comment_id)
        if comment is None:
            raise WorkbookError(
                f"Comment '{comment_id}' not found", data={"comment_id": comment_id}
            )
        return comment

    def _shift(
        self,
        move: Callable[[int, int], tuple[int, int] | None],
        *,
        rows: Callable[[int], int | None] | None = None,
    ) -> None:
        """Re-key every cell-addressed store through `move(column, row)`.

        `move` returns the new `(column, row)` or None to drop the cell.
        `rows` re-keys hidden rows the same way for row insertions and deletions.
        """

        def rekey(store: dict[str, Any]) -> dict[str, Any]:
            moved: dict[str, Any] = {}
            for key, item in store.items():
                target = move(*split_cell_reference(key))
                if target is not None:
                    moved[f"{column_number_to_letter(target[0])}{target[1]}"] = item
            return moved

        self.values = rekey(self.values)
        self.formulas = rekey(self.formulas)
        self.formats = rekey(self.formats)
        if rows is not None:
            self.hidden_rows = {
                moved for moved in map(rows, self.hidden_rows) if moved is not None
            }
        for comment in list(self.comments.values()):
            target = move(*split_cell_reference(comment.cell))
            if target is None:
                del self.comments[comment.id]
            else:
                comment.cell = f"{column_number_to_letter(target[0])}{target[1]}"
        _LOGGER.debug("workbook.shift cells=%d", len(self.values))
