"""Spreadsheet collaborator contract and the in-memory implementation."""

from gridwise.workbook.memory import InMemoryWorkbook
from gridwise.workbook.protocol import (
    CellData,
    CellFormat,
    CellValueType,
    ChartType,
    CommentRecord,
    FilterCriteria,
    FilterOperator,
    FindMatch,
    FindOptions,
    RangeData,
    SortOptions,
    SpreadsheetCollaborator,
    WorksheetMetadata,
)

__all__ = [
    "CellData",
    "CellFormat",
    "CellValueType",
    "ChartType",
    "CommentRecord",
    "FilterCriteria",
    "FilterOperator",
    "FindMatch",
    "FindOptions",
    "InMemoryWorkbook",
    "RangeData",
    "SortOptions",
    "SpreadsheetCollaborator",
    "WorksheetMetadata",
]
