"""Stable error contracts for command interpretation and execution."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable machine-readable error codes carried on failed responses."""

    INVALID_CELL_REFERENCE = "invalid_cell_reference"
    INVALID_RANGE_REFERENCE = "invalid_range_reference"
    UNRECOGNIZED_COMMAND = "unrecognized_command"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_PARAMETER = "invalid_parameter"
    EXECUTION_FAILED = "execution_failed"
    WORKBOOK_ERROR = "workbook_error"
    NOT_INITIALIZED = "not_initialized"


class GridwiseError(RuntimeError):
    """Base failure with a stable deterministic code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        *,
        data: dict[str, object] | None = None,
    ) -> None:
        """Create failure.

        Args:
            code: Stable error code.
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(message)
        self.code = code
        self.data = data or {}


class WorkbookError(GridwiseError):
    """Raised by spreadsheet collaborators when an operation is rejected."""

    def __init__(self, message: str, *, data: dict[str, object] | None = None) -> None:
        """Create collaborator failure.

        Args:
            message: Human-readable error message.
            data: Optional structured payload for diagnostics.
        """
        super().__init__(ErrorCode.WORKBOOK_ERROR, message, data=data)
