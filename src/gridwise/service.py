"""Natural-language spreadsheet command service."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gridwise.analysis import DataAnalysis, analyze_values
from gridwise.commands.confirmation import describe_pending
from gridwise.commands.handlers._support import cell_value_type
from gridwise.commands.normalize import (
    normalize_cell_reference,
    normalize_range_reference,
)
from gridwise.commands.parser import CommandParser
from gridwise.commands.registry import CommandDispatcher
from gridwise.commands.types import (
    AIResponse,
    CommandIntent,
    CommandSuggestion,
    ParsedCommand,
)
from gridwise.config import GridwiseConfig
from gridwise.errors import ErrorCode, GridwiseError
from gridwise.session.models import AIContext, MessageRole
from gridwise.workbook.protocol import (
    CellFormat,
    CellValueType,
    FindMatch,
    FindOptions,
    SpreadsheetCollaborator,
    WorksheetMetadata,
)

_LOGGER = logging.getLogger(__name__)


class CellReadout(BaseModel):
    """Cell content with its classified type."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    value: Any = None
    formula: str | None = None
    type: CellValueType
    formatting: CellFormat | None = None


class RangeReadout(BaseModel):
    """Range content with its dimensions."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    range: str
    values: list[list[Any]] = Field(default_factory=list)
    formulas: list[list[str | None]] | None = None
    row_count: int = 0
    column_count: int = 0


class AIService:
    """Single entry point turning command text into spreadsheet effects.

    The service owns one session context and one spreadsheet collaborator.
    Each `process_command` call runs parse, validate, the confirmation gate
    and dispatch in that order; nothing is carried between calls except the
    context.
    """

    def __init__(
        self,
        workbook: SpreadsheetCollaborator | None = None,
        *,
        config: GridwiseConfig | None = None,
        parser: CommandParser | None = None,
        dispatcher: CommandDispatcher | None = None,
        context: AIContext | None = None,
    ) -> None:
        """Construct service.

        Args:
            workbook: Spreadsheet collaborator; may be attached later.
            config: Runtime configuration, defaults when omitted.
            parser: Optional parser override.
            dispatcher: Optional dispatcher override.
            context: Initial session context.
        """
        self._workbook = workbook
        self._config = config or GridwiseConfig()
        self._parser = parser or CommandParser(
            max_suggestions=self._config.parser.max_suggestions
        )
        self._dispatcher = dispatcher or CommandDispatcher(
            preview_rows=self._config.responses.preview_rows
        )
        self._context = (context or AIContext()).bounded(**self._bounds())
        self._pending_text: str | None = None

    def attach(self, workbook: SpreadsheetCollaborator) -> None:
        """Attach the spreadsheet collaborator commands run against."""
        self._workbook = workbook

    def process_command(
        self,
        text: str,
        context: Mapping[str, Any] | AIContext | None = None,
        *,
        confirmed: bool = False,
    ) -> AIResponse:
        """Parse, validate, gate and execute one natural-language command.

        Args:
            text: Raw user instruction.
            context: Optional partial context merged before parsing.
            confirmed: Whether the user already confirmed a destructive command.

        Returns:
            Terminal response for this command. Destructive commands that are
            not yet confirmed return `code="confirmation_required"` without
            touching the spreadsheet.
        """
        if context is not None:
            self.update_context(context)
        # A confirmed resubmission of the held command is the same user turn.
        if not (confirmed and text == self._pending_text):
            self._record(MessageRole.USER, text)
        response = self._run(text, confirmed=confirmed)
        self._pending_text = (
            text if response.code == "confirmation_required" else None
        )
        if response.operations:
            self._context = self._context.with_operations(
                response.operations,
                max_recent_operations=self._config.context.max_recent_operations,
            )
        self._record(MessageRole.ASSISTANT, response.message)
        return response

    def _run(self, text: str, *, confirmed: bool) -> AIResponse:
        parsed = self._parser.parse(text, self._context)
        validation = self._parser.validate(parsed)
        if not validation.valid:
            _LOGGER.warning(
                "service.rejected intent=%s code=%s", parsed.intent.value, validation.code
            )
            return AIResponse.failure(
                validation.errors[0],
                message=", ".join(validation.errors),
                code=validation.code or ErrorCode.INVALID_PARAMETER.value,
            )
        for warning in validation.warnings:
            _LOGGER.debug("service.warning intent=%s %s", parsed.intent.value, warning)

        if (
            parsed.requires_confirmation
            and self._config.confirmation.enabled
            and not confirmed
        ):
            _LOGGER.info("service.pending intent=%s", parsed.intent.value)
            return AIResponse.ok(
                _with_notes(describe_pending(parsed), validation.warnings),
                requires_confirmation=True,
                code="confirmation_required",
            )

        if self._workbook is None:
            return AIResponse.failure(
                "Spreadsheet is not initialized",
                message="Failed to execute command",
                code=ErrorCode.NOT_INITIALIZED.value,
            )
        response = self._execute(parsed, self._workbook)
        if response.success and validation.warnings:
            return response.model_copy(
                update={"message": _with_notes(response.message, validation.warnings)}
            )
        return response

    def _execute(
        self, parsed: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        try:
            return self._dispatcher.dispatch(parsed, workbook)
        except GridwiseError as exc:
            _LOGGER.exception("service.failed intent=%s", parsed.intent.value)
            return AIResponse.failure(
                str(exc), message="Failed to execute command", code=exc.code.value
            )
        except Exception as exc:
            _LOGGER.exception("service.failed intent=%s", parsed.intent.value)
            return AIResponse.failure(
                str(exc) or type(exc).__name__,
                message="Failed to execute command",
                code=ErrorCode.EXECUTION_FAILED.value,
            )

    def update_context(self, patch: Mapping[str, Any] | AIContext) -> None:
        """Merge a partial context into the session context."""
        self._context = self._context.merged(patch, **self._bounds())

    def get_context(self) -> AIContext:
        """Return a copy of the session context."""
        return self._context.model_copy(deep=True)

    def get_suggestions(self, partial: str = "") -> list[CommandSuggestion]:
        return self._parser.get_suggestions(partial)

    def read_cell(self, cell: str) -> CellReadout:
        """Read one cell with its classified type.

        Raises:
            GridwiseError: If no spreadsheet is attached.
            WorkbookError: If the collaborator rejects the reference.
        """
        data = self._require_workbook().get_cell(normalize_cell_reference(cell))
        return CellReadout(
            value=data.value,
            formula=data.formula,
            type=cell_value_type(data),
            formatting=data.formatting,
        )

    def read_range(self, ref: str) -> RangeReadout:
        """Read a range with its dimensions.

        Raises:
            GridwiseError: If no spreadsheet is attached.
            WorkbookError: If the collaborator rejects the reference.
        """
        normalized = normalize_range_reference(ref)
        data = self._require_workbook().get_range(normalized)
        return RangeReadout(
            range=normalized,
            values=data.values,
            formulas=data.formulas,
            row_count=len(data.values),
            column_count=len(data.values[0]) if data.values else 0,
        )

    def read_worksheet(self) -> WorksheetMetadata:
        return self._require_workbook().get_worksheet_metadata()

    def analyze_data(self, ref: str) -> DataAnalysis:
        readout = self.read_range(ref)
        return analyze_values(readout.range, readout.values)

    def find_text(
        self,
        text: str,
        ref: str | None = None,
        *,
        match_case: bool = False,
        match_entire_cell: bool = False,
    ) -> list[FindMatch]:
        """Find cells containing `text`, optionally inside one range."""
        options = FindOptions(
            match_case=match_case,
            match_entire_cell=match_entire_cell,
            range=normalize_range_reference(ref) if ref else None,
        )
        return self._require_workbook().find_all(text, options)

    def replace_text(
        self,
        find: str,
        replace: str,
        ref: str | None = None,
        *,
        match_case: bool = False,
        match_entire_cell: bool = False,
    ) -> AIResponse:
        """Replace text directly, bypassing parsing and the confirmation gate.

        Returns:
            The find/replace response with one operation per replaced cell.
        """
        parameters: dict[str, Any] = {
            "find": find,
            "replace": replace,
            "match_case": match_case,
            "match_entire_cell": match_entire_cell,
        }
        if ref:
            parameters["range"] = normalize_range_reference(ref)
        parsed = ParsedCommand(
            intent=CommandIntent.FIND_REPLACE,
            parameters=parameters,
            target_range=parameters.get("range"),
            requires_confirmation=True,
            raw=f"replace {find} with {replace}",
        )
        response = self._execute(parsed, self._require_workbook())
        if response.operations:
            self._context = self._context.with_operations(
                response.operations,
                max_recent_operations=self._config.context.max_recent_operations,
            )
        return response

    def _require_workbook(self) -> SpreadsheetCollaborator:
        if self._workbook is None:
            raise GridwiseError(
                ErrorCode.NOT_INITIALIZED, "Spreadsheet is not initialized"
            )
        return self._workbook

    def _record(self, role: MessageRole, content: str) -> None:
        self._context = self._context.with_message(
            role,
            content,
            max_conversation_history=self._config.context.max_conversation_history,
        )

    def _bounds(self) -> dict[str, int]:
        return {
            "max_recent_operations": self._config.context.max_recent_operations,
            "max_conversation_history": self._config.context.max_conversation_history,
        }


def _with_notes(message: str, warnings: list[str]) -> str:
    if not warnings:
        return message
    return "\n".join([message, *(f"Note: {warning}" for warning in warnings)])
