"""Command handler registry and dispatch."""

from __future__ import annotations

import logging

from gridwise.commands.handlers.analyze import AnalyzeDataCommand
from gridwise.commands.handlers.comments import (
    AddCommentCommand,
    DeleteCommentCommand,
    GetCommentsCommand,
    ReplyCommentCommand,
    ResolveCommentCommand,
)
from gridwise.commands.handlers.data import (
    CreateChartCommand,
    FilterDataCommand,
    SortDataCommand,
)
from gridwise.commands.handlers.find_replace import FindReplaceCommand
from gridwise.commands.handlers.format import FormatCellsCommand
from gridwise.commands.handlers.read import (
    DEFAULT_PREVIEW_ROWS,
    ReadCellCommand,
    ReadRangeCommand,
)
from gridwise.commands.handlers.structure import (
    DeleteColumnCommand,
    DeleteRowCommand,
    InsertColumnCommand,
    InsertRowCommand,
)
from gridwise.commands.handlers.write import (
    SetFormulaCommand,
    WriteCellCommand,
    WriteRangeCommand,
)
from gridwise.commands.types import (
    AIResponse,
    CommandHandler,
    CommandIntent,
    ParsedCommand,
)
from gridwise.errors import ErrorCode
from gridwise.workbook.protocol import SpreadsheetCollaborator

_LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Deterministic intent-to-handler registry."""

    def __init__(
        self,
        *,
        preview_rows: int = DEFAULT_PREVIEW_ROWS,
        handlers: dict[CommandIntent, CommandHandler] | None = None,
    ) -> None:
        """Construct dispatcher with built-in handlers plus optional overrides.

        Args:
            preview_rows: Sample rows shown by the `read_range` handler.
            handlers: Optional custom handlers keyed by intent.
        """
        self._handlers: dict[CommandIntent, CommandHandler] = {
            CommandIntent.READ_CELL: ReadCellCommand(),
            CommandIntent.READ_RANGE: ReadRangeCommand(preview_rows=preview_rows),
            CommandIntent.WRITE_CELL: WriteCellCommand(),
            CommandIntent.WRITE_RANGE: WriteRangeCommand(),
            CommandIntent.SET_FORMULA: SetFormulaCommand(),
            CommandIntent.FORMAT_CELLS: FormatCellsCommand(),
            CommandIntent.SORT_DATA: SortDataCommand(),
            CommandIntent.FILTER_DATA: FilterDataCommand(),
            CommandIntent.CREATE_CHART: CreateChartCommand(),
            CommandIntent.ANALYZE_DATA: AnalyzeDataCommand(),
            CommandIntent.INSERT_ROW: InsertRowCommand(),
            CommandIntent.DELETE_ROW: DeleteRowCommand(),
            CommandIntent.INSERT_COLUMN: InsertColumnCommand(),
            CommandIntent.DELETE_COLUMN: DeleteColumnCommand(),
            CommandIntent.FIND_REPLACE: FindReplaceCommand(),
            CommandIntent.ADD_COMMENT: AddCommentCommand(),
            CommandIntent.REPLY_COMMENT: ReplyCommentCommand(),
            CommandIntent.RESOLVE_COMMENT: ResolveCommentCommand(),
            CommandIntent.DELETE_COMMENT: DeleteCommentCommand(),
            CommandIntent.GET_COMMENTS: GetCommentsCommand(),
        }
        if handlers:
            self._handlers.update(handlers)

    def dispatch(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Dispatch a validated command to its intent handler.

        Handler exceptions propagate to the caller.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator passed to the handler.

        Returns:
            Handler response, or an error envelope when no handler is registered.
        """
        handler = self._handlers.get(command.intent)
        if handler is None:
            return AIResponse.failure(
                f"Unknown command intent: {command.intent.value}",
                code=ErrorCode.UNRECOGNIZED_COMMAND.value,
            )
        _LOGGER.debug(
            "dispatcher.dispatch intent=%s handler=%s",
            command.intent.value,
            type(handler).__name__,
        )
        return handler.execute(command, workbook)
