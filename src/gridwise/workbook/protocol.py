"""Spreadsheet collaborator contract consumed by command handlers."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class CellValueType(StrEnum):
    """Reported type of a single cell's content."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    FORMULA = "formula"


class CellFormat(BaseModel):
    """Structural cell format applied by `apply_format`."""

    model_config = ConfigDict(extra="forbid")

    background_color: str | None = None
    font_color: str | None = None
    font_size: float | None = None
    font_family: str | None = None
    bold: bool | None = None
    italic: bool | None = None
    underline: bool | None = None
    strikethrough: bool | None = None
    horizontal_align: str | None = None
    vertical_align: str | None = None
    number_format: str | None = None


class CellData(BaseModel):
    """Raw cell content returned by `get_cell`."""

    model_config = ConfigDict(extra="forbid")

    value: Any = None
    formula: str | None = None
    formatting: CellFormat | None = None


class RangeData(BaseModel):
    """Raw range content returned by `get_range`."""

    model_config = ConfigDict(extra="forbid")

    values: list[list[Any]] = Field(default_factory=list)
    formulas: list[list[str | None]] | None = None


class FindMatch(BaseModel):
    """One cell matched by `find_all`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cell: str
    value: Any
    row: int
    column: int


class FindOptions(BaseModel):
    """Search flags for `find_all`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    match_case: bool = False
    match_entire_cell: bool = False
    range: str | None = None


class WorksheetMetadata(BaseModel):
    """Summary of the active worksheet."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    row_count: int = 0
    column_count: int = 0
    has_formulas: bool = False
    data_ranges: list[str] = Field(default_factory=list)


class SortOptions(BaseModel):
    """Sort request; `column` is a 0-based offset within the range."""

    model_config = ConfigDict(extra="forbid")

    column: int = Field(default=0, ge=0)
    ascending: bool = True
    case_sensitive: bool = False


class FilterOperator(StrEnum):
    """Supported filter comparison operators."""

    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


class FilterCriteria(BaseModel):
    """Filter request; `column` is a 0-based offset within the range."""

    model_config = ConfigDict(extra="forbid")

    column: int = Field(default=0, ge=0)
    operator: FilterOperator = FilterOperator.CONTAINS
    value: Any = None


class ChartType(StrEnum):
    """Chart kinds a collaborator may be asked to create."""

    LINE = "line"
    COLUMN = "column"
    BAR = "bar"
    PIE = "pie"
    AREA = "area"
    SCATTER = "scatter"


class CommentRecord(BaseModel):
    """Cell comment thread as reported by `list_comments`."""

    model_config = ConfigDict(extra="forbid")

    id: str
    cell: str
    content: str
    resolved: bool = False
    replies: list[str] = Field(default_factory=list)


class SpreadsheetCollaborator(Protocol):
    """Operations the engine needs from a spreadsheet implementation.

    Implementations signal rejected operations by raising, preferably
    `gridwise.errors.WorkbookError`.
    """

    def get_cell(self, ref: str) -> CellData:
        """Return raw content of one cell."""

    def set_cell(self, ref: str, value: Any) -> None:
        """Store one literal value."""

    def get_range(self, ref: str) -> RangeData:
        """Return values (and formulas when present) of a range."""

    def set_range(self, ref: str, values: list[list[Any]]) -> None:
        """Store a 2D block of values anchored at the range's top-left cell."""

    def set_formula(self, ref: str, formula: str) -> None:
        """Store a formula (leading `=` included)."""

    def apply_format(self, ref: str, fmt: CellFormat) -> None:
        """Apply non-null format fields to every cell in a range."""

    def find_all(self, text: str, options: FindOptions) -> list[FindMatch]:
        """Return matching cells in row-major order."""

    def get_worksheet_metadata(self) -> WorksheetMetadata:
        """Return active worksheet summary."""

    def sort_range(self, ref: str, options: SortOptions) -> None:
        """Sort rows of a range in place."""

    def filter_range(self, ref: str, criteria: FilterCriteria) -> int:
        """Hide non-matching rows of a range, returning visible row count."""

    def create_chart(self, ref: str, chart_type: ChartType) -> str:
        """Create a chart over a range, returning the chart id."""

    def insert_row(self, row: int) -> None:
        """Insert an empty row before 1-based `row`."""

    def delete_row(self, row: int) -> None:
        """Delete 1-based `row`."""

    def insert_column(self, column: int) -> None:
        """Insert an empty column before 0-based `column`."""

    def delete_column(self, column: int) -> None:
        """Delete 0-based `column`."""

    def add_comment(self, ref: str, content: str) -> str:
        """Attach a comment to a cell, returning the comment id."""

    def reply_comment(self, comment_id: str, content: str) -> None:
        """Append a reply to an existing comment."""

    def resolve_comment(self, comment_id: str) -> None:
        """Mark a comment resolved."""

    def delete_comment(self, comment_id: str) -> None:
        """Remove a comment."""

    def list_comments(self) -> list[CommentRecord]:
        """Return all comments on the active worksheet."""
