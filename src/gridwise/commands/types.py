"""Shared command-domain types."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from gridwise.session.models import Operation
from gridwise.workbook.protocol import SpreadsheetCollaborator


class CommandIntent(StrEnum):
    """Closed set of operations a command can be classified as."""

    READ_CELL = "read_cell"
    WRITE_CELL = "write_cell"
    READ_RANGE = "read_range"
    WRITE_RANGE = "write_range"
    SET_FORMULA = "set_formula"
    FORMAT_CELLS = "format_cells"
    SORT_DATA = "sort_data"
    FILTER_DATA = "filter_data"
    CREATE_CHART = "create_chart"
    FIND_REPLACE = "find_replace"
    INSERT_ROW = "insert_row"
    DELETE_ROW = "delete_row"
    INSERT_COLUMN = "insert_column"
    DELETE_COLUMN = "delete_column"
    ANALYZE_DATA = "analyze_data"
    ADD_COMMENT = "add_comment"
    REPLY_COMMENT = "reply_comment"
    RESOLVE_COMMENT = "resolve_comment"
    DELETE_COMMENT = "delete_comment"
    GET_COMMENTS = "get_comments"
    UNKNOWN = "unknown"


CELL_INTENTS = frozenset(
    {
        CommandIntent.READ_CELL,
        CommandIntent.WRITE_CELL,
        CommandIntent.SET_FORMULA,
        CommandIntent.ADD_COMMENT,
    }
)
RANGE_INTENTS = frozenset(
    {
        CommandIntent.READ_RANGE,
        CommandIntent.WRITE_RANGE,
        CommandIntent.FORMAT_CELLS,
        CommandIntent.SORT_DATA,
        CommandIntent.FILTER_DATA,
        CommandIntent.CREATE_CHART,
        CommandIntent.ANALYZE_DATA,
    }
)
ROW_INTENTS = frozenset({CommandIntent.INSERT_ROW, CommandIntent.DELETE_ROW})
COLUMN_INTENTS = frozenset({CommandIntent.INSERT_COLUMN, CommandIntent.DELETE_COLUMN})


class ParsedCommand(BaseModel):
    """Classified command with intent-specific parameters."""

    model_config = ConfigDict(extra="forbid")

    intent: CommandIntent
    parameters: dict[str, Any] = Field(default_factory=dict)
    target_range: str | None = None
    requires_confirmation: bool = False
    used_context: bool = False
    raw: str = ""


class ValidationResult(BaseModel):
    """Outcome of validating a parsed command; warnings never block."""

    model_config = ConfigDict(extra="forbid")

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    code: str | None = None


class CommandSuggestion(BaseModel):
    """Canonical command template offered to users."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    command: str
    description: str
    example: str


class AIResponse(BaseModel):
    """Terminal result of one parse-validate-dispatch cycle."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    success: bool
    message: str
    operations: list[Operation] = Field(default_factory=list)
    requires_confirmation: bool = False
    error: str | None = None
    code: str = "ok"

    @classmethod
    def ok(
        cls,
        message: str,
        *,
        operations: list[Operation] | None = None,
        requires_confirmation: bool = False,
        code: str = "ok",
    ) -> AIResponse:
        """Construct a successful response.

        Args:
            message: Human/AI-readable summary of the effect.
            operations: Audit records for applied writes.
            requires_confirmation: Whether the command belongs to the gated set.
            code: Stable machine-readable success code.

        Returns:
            Successful response.
        """
        return cls(
            success=True,
            message=message,
            operations=operations or [],
            requires_confirmation=requires_confirmation,
            code=code,
        )

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        message: str | None = None,
        code: str = "error",
        operations: list[Operation] | None = None,
        requires_confirmation: bool = False,
    ) -> AIResponse:
        """Construct a failed response.

        Args:
            error: Primary error text.
            message: Summary text, defaults to `error`.
            code: Stable machine-readable error code.
            operations: Writes that committed before the failure, if any.
            requires_confirmation: Whether the command belongs to the gated set.

        Returns:
            Failed response.
        """
        return cls(
            success=False,
            message=message if message is not None else error,
            operations=operations or [],
            requires_confirmation=requires_confirmation,
            error=error,
            code=code,
        )


class CommandHandler(Protocol):
    """Protocol implemented by intent handlers."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Execute a validated command against the spreadsheet collaborator.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator receiving the call.
        """
