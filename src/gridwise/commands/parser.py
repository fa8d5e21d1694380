"""Rule-based natural-language command parser."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from gridwise.commands.confirmation import requires_confirmation
from gridwise.commands.normalize import (
    column_letter_to_number,
    column_number_to_letter,
    is_valid_cell_reference,
    is_valid_range_reference,
    normalize_cell_reference,
    normalize_formula,
    normalize_range_reference,
    parse_filter_criteria,
    parse_format,
    parse_value,
    parse_values,
    range_columns,
    selection_anchor,
    widen_to_range,
)
from gridwise.commands.patterns import INTENT_PATTERNS, IntentMatch, IntentPattern, match_intent
from gridwise.commands.suggestions import (
    COMMAND_CATALOGUE,
    filter_suggestions,
    rank_suggestions,
)
from gridwise.commands.types import (
    CELL_INTENTS,
    COLUMN_INTENTS,
    RANGE_INTENTS,
    ROW_INTENTS,
    CommandIntent,
    CommandSuggestion,
    ParsedCommand,
    ValidationResult,
)
from gridwise.errors import ErrorCode
from gridwise.session.models import AIContext
from gridwise.workbook.protocol import ChartType

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_SUGGESTIONS = 3
DEFAULT_CHART_TYPE = ChartType.COLUMN.value

_VAGUE_WORDS = ("selected", "selection")
_COMMENT_ID_INTENTS = frozenset(
    {
        CommandIntent.REPLY_COMMENT,
        CommandIntent.RESOLVE_COMMENT,
        CommandIntent.DELETE_COMMENT,
    }
)
_COMMENT_CONTENT_INTENTS = frozenset(
    {CommandIntent.ADD_COMMENT, CommandIntent.REPLY_COMMENT}
)
_COLUMN_OPTION_KEYS = {
    CommandIntent.SORT_DATA: "options",
    CommandIntent.FILTER_DATA: "criteria",
}

_Issue = tuple[ErrorCode, str]


class CommandParser:
    """Deterministic parser from free text to `ParsedCommand`.

    The parser is stateless apart from its pattern table; the caller passes
    the session context on every call.
    """

    def __init__(
        self,
        *,
        patterns: tuple[IntentPattern, ...] = INTENT_PATTERNS,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
        catalogue: tuple[CommandSuggestion, ...] = COMMAND_CATALOGUE,
    ) -> None:
        """Construct parser.

        Args:
            patterns: Priority-ordered intent pattern table.
            max_suggestions: Cap on suggestions attached to unknown commands.
            catalogue: Suggestion catalogue for help and unknown commands.
        """
        self._patterns = patterns
        self._max_suggestions = max_suggestions
        self._catalogue = catalogue

    def parse(self, command: str, context: AIContext | None = None) -> ParsedCommand:
        """Classify command text and extract its parameters.

        Args:
            command: Raw user instruction.
            context: Session context supplying the current selection.

        Returns:
            Parsed command; intent `unknown` carries ranked suggestions.
        """
        text = " ".join(command.split())
        match = match_intent(text, self._patterns)
        if match is None:
            suggestions = rank_suggestions(
                text, limit=self._max_suggestions, catalogue=self._catalogue
            )
            _LOGGER.debug(
                "parser.unknown text=%r suggestions=%d", text, len(suggestions)
            )
            return ParsedCommand(
                intent=CommandIntent.UNKNOWN,
                parameters={"suggestions": suggestions},
                raw=command,
            )

        parameters = _extract_parameters(match)
        selection = context.current_selection.strip().upper() if context else ""
        used_context = _resolve_context(match, parameters, selection)
        target = parameters.get("range") or parameters.get("cell")
        _LOGGER.debug(
            "parser.matched intent=%s used_context=%s target=%s",
            match.intent.value,
            used_context,
            target,
        )
        return ParsedCommand(
            intent=match.intent,
            parameters=parameters,
            target_range=target,
            requires_confirmation=requires_confirmation(match.intent),
            used_context=used_context,
            raw=command,
        )

    def validate(self, command: ParsedCommand) -> ValidationResult:
        """Check a parsed command before anything is dispatched.

        Args:
            command: Parsed command.

        Returns:
            Errors block execution; warnings never do. `code` carries the
            error code of the first error.
        """
        if command.intent is CommandIntent.UNKNOWN:
            return ValidationResult(
                valid=False,
                errors=[_unknown_message(command.parameters.get("suggestions"))],
                code=ErrorCode.UNRECOGNIZED_COMMAND.value,
            )

        issues = _parameter_issues(command)
        warnings = _warnings(command)
        return ValidationResult(
            valid=not issues,
            errors=[message for _, message in issues],
            warnings=warnings,
            code=issues[0][0].value if issues else None,
        )

    def get_suggestions(self, partial: str) -> list[CommandSuggestion]:
        """Return catalogue entries matching partial command text.

        Args:
            partial: Partial command text; blank returns the whole catalogue.

        Returns:
            Matching suggestions, empty when nothing matches.
        """
        return filter_suggestions(partial, self._catalogue)


def _extract_parameters(match: IntentMatch) -> dict[str, Any]:
    groups = match.groups
    intent = match.intent
    params: dict[str, Any] = {}
    if "cell" in groups:
        params["cell"] = normalize_cell_reference(groups["cell"])
    if "range" in groups:
        params["range"] = widen_to_range(normalize_range_reference(groups["range"]))
    if "value" in groups:
        params["value"] = parse_value(groups["value"])
    if "values" in groups:
        params["values"] = parse_values(groups["values"], params.get("range"))
    if "formula" in groups:
        params["formula"] = normalize_formula(groups["formula"])
    if "format" in groups:
        params["format"] = parse_format(groups["format"])
    if "criteria" in groups:
        params["criteria"] = parse_filter_criteria(groups["criteria"])
    if "content" in groups:
        params["content"] = groups["content"].strip()
    if "comment_id" in groups:
        params["comment_id"] = groups["comment_id"]

    if intent is CommandIntent.SORT_DATA:
        params["options"] = {
            "ascending": groups.get("order", "ascending").lower() != "descending",
        }
        if groups.get("column"):
            params["options"]["column"] = column_letter_to_number(groups["column"])
    elif intent is CommandIntent.CREATE_CHART:
        params["type"] = groups.get("type", DEFAULT_CHART_TYPE).lower()
    elif intent in ROW_INTENTS and "row" in groups:
        params["row"] = int(groups["row"])
    elif intent in COLUMN_INTENTS and "column" in groups:
        params["column"] = column_letter_to_number(groups["column"])
    elif intent is CommandIntent.FIND_REPLACE:
        flags = groups.get("flags", "").lower()
        params["find"] = groups["find"]
        params["replace"] = groups["replace"]
        params["match_case"] = "case" in flags
        params["match_entire_cell"] = "whole" in flags or "entire" in flags
    return params


def _resolve_context(
    match: IntentMatch, params: dict[str, Any], selection: str
) -> bool:
    """Fill missing references from the current selection.

    Returns:
        Whether the selection replaced a missing explicit reference.
    """
    intent = match.intent
    deictic = "ctx" in match.groups

    if intent in RANGE_INTENTS:
        return _substitute(params, "range", selection, widen_to_range(selection))
    if intent in CELL_INTENTS:
        return _substitute(params, "cell", selection, selection.split(":", 1)[0])
    if intent is CommandIntent.FIND_REPLACE:
        if "range" in params:
            if selection:
                params["context_range"] = selection
            return False
        if not deictic:
            return False
        if not selection:
            params["range"] = None
            return False
        params["range"] = widen_to_range(selection)
        params["context_range"] = selection
        return True

    key = "row" if intent in ROW_INTENTS else "column"
    if intent not in ROW_INTENTS | COLUMN_INTENTS or key in params or not selection:
        return False
    anchor = selection_anchor(selection)
    if anchor is None:
        return False
    params[key] = anchor[1] if key == "row" else anchor[0]
    params["context_range"] = selection
    return True


def _substitute(
    params: dict[str, Any], key: str, selection: str, replacement: str
) -> bool:
    if not selection:
        return False
    params["context_range"] = selection
    if key in params:
        return False
    params[key] = replacement
    return True


def _unknown_message(suggestions: Any) -> str:
    message = "Could not understand the command"
    examples = [_suggestion_text(item) for item in suggestions or []]
    if examples:
        message += f". Did you mean: {', '.join(examples)}?"
    return message


def _suggestion_text(item: Any) -> str:
    if isinstance(item, CommandSuggestion):
        return item.example
    if isinstance(item, Mapping):
        return str(item.get("example") or item.get("command", ""))
    return str(item)


def _parameter_issues(command: ParsedCommand) -> list[_Issue]:
    intent = command.intent
    params = command.parameters
    issues: list[_Issue] = []

    if intent in CELL_INTENTS:
        issues.extend(_cell_issues(params.get("cell")))
    if intent in RANGE_INTENTS:
        issues.extend(_range_issues(params.get("range")))
    if intent is CommandIntent.FIND_REPLACE and "range" in params:
        issues.extend(_range_issues(params["range"]))

    if intent is CommandIntent.WRITE_CELL and params.get("value") is None:
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Value is required for write operation. Example: set A1 to 100",
            )
        )
    if intent is CommandIntent.SET_FORMULA and not params.get("formula"):
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Formula is required. Example: calculate SUM(A1:A10) in A11",
            )
        )
    if intent is CommandIntent.WRITE_RANGE and not params.get("values"):
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Values are required for range write operation. "
                "Example: fill A1:B2 with 1, 2; 3, 4",
            )
        )
    if intent is CommandIntent.FORMAT_CELLS and not params.get("format"):
        issues.append(
            (
                ErrorCode.INVALID_PARAMETER,
                "Unrecognized format. Use currency, percentage, date, bold, "
                "italic, red, blue or green. Example: format B1:B10 as currency",
            )
        )
    if intent is CommandIntent.FILTER_DATA and not params.get("criteria"):
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Filter criteria are required. Example: filter A1:C10 where B > 100",
            )
        )
    if intent in _COLUMN_OPTION_KEYS:
        issues.extend(_range_column_issues(intent, params))
    if intent is CommandIntent.CREATE_CHART:
        issues.extend(_chart_issues(params.get("type")))
    if intent is CommandIntent.FIND_REPLACE:
        issues.extend(_find_replace_issues(params))
    if intent in ROW_INTENTS:
        issues.extend(_row_issues(intent, params.get("row")))
    if intent in COLUMN_INTENTS:
        issues.extend(_column_issues(intent, params.get("column")))
    if intent in _COMMENT_ID_INTENTS and not params.get("comment_id"):
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Comment id is required. Example: resolve comment c1",
            )
        )
    if intent in _COMMENT_CONTENT_INTENTS and not params.get("content"):
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Comment text is required. "
                "Example: add comment to A1 saying check this total",
            )
        )
    return issues


def _cell_issues(cell: Any) -> list[_Issue]:
    if not cell:
        return [(ErrorCode.MISSING_PARAMETER, "Cell reference is required")]
    if not isinstance(cell, str) or not is_valid_cell_reference(cell):
        return [
            (
                ErrorCode.INVALID_CELL_REFERENCE,
                f"Invalid cell reference: {cell}. Use format like A1, B2, AA10",
            )
        ]
    return []


def _range_issues(ref: Any) -> list[_Issue]:
    if not ref:
        return [(ErrorCode.MISSING_PARAMETER, "Range reference is required")]
    if not isinstance(ref, str) or not is_valid_range_reference(ref):
        return [
            (
                ErrorCode.INVALID_RANGE_REFERENCE,
                f"Invalid range reference: {ref}. Use format like A1:B10",
            )
        ]
    return []


def _chart_issues(chart_type: Any) -> list[_Issue]:
    supported = [member.value for member in ChartType]
    if chart_type in supported:
        return []
    return [
        (
            ErrorCode.INVALID_PARAMETER,
            f"Unsupported chart type: {chart_type}. Use one of: "
            f"{', '.join(supported)}. Example: create line chart from A1:B10",
        )
    ]


def _range_column_issues(
    intent: CommandIntent, params: Mapping[str, Any]
) -> list[_Issue]:
    payload = params.get(_COLUMN_OPTION_KEYS[intent]) or {}
    column = payload.get("column")
    ref = params.get("range")
    columns = range_columns(ref) if isinstance(ref, str) else None
    if column is None or columns is None:
        return []
    first, last = columns
    if first <= column <= last:
        return []
    letter = column_number_to_letter(first)
    example = (
        f"sort {ref} by column {letter}"
        if intent is CommandIntent.SORT_DATA
        else f"filter {ref} where {letter} > 100"
    )
    return [
        (
            ErrorCode.INVALID_PARAMETER,
            f"Column {column_number_to_letter(column)} is outside {ref}. "
            f"Example: {example}",
        )
    ]


def _find_replace_issues(params: Mapping[str, Any]) -> list[_Issue]:
    issues: list[_Issue] = []
    if not params.get("find"):
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Search text is required. Example: replace old with new in A1:C10",
            )
        )
    if params.get("replace") is None:
        issues.append(
            (
                ErrorCode.MISSING_PARAMETER,
                "Replacement text is required. Example: replace old with new in A1:C10",
            )
        )
    return issues


def _row_issues(intent: CommandIntent, row: Any) -> list[_Issue]:
    verb = "insert row at" if intent is CommandIntent.INSERT_ROW else "delete row"
    if row is None:
        return [
            (
                ErrorCode.MISSING_PARAMETER,
                f"Row number is required. Example: {verb} 5",
            )
        ]
    if not isinstance(row, int) or row < 1:
        return [
            (
                ErrorCode.INVALID_PARAMETER,
                f"Invalid row number: {row}. Rows start at 1. Example: {verb} 5",
            )
        ]
    return []


def _column_issues(intent: CommandIntent, column: Any) -> list[_Issue]:
    verb = (
        "insert column at" if intent is CommandIntent.INSERT_COLUMN else "delete column"
    )
    if column is None:
        return [
            (
                ErrorCode.MISSING_PARAMETER,
                f"Column letter is required. Example: {verb} C",
            )
        ]
    if not isinstance(column, int) or column < 0:
        return [
            (
                ErrorCode.INVALID_PARAMETER,
                f"Invalid column: {column}. Example: {verb} C",
            )
        ]
    return []


def _warnings(command: ParsedCommand) -> list[str]:
    params = command.parameters
    selection = params.get("context_range")
    warnings: list[str] = []
    if command.used_context:
        warnings.append(f"Using current selection ({selection}) for this command")
        lowered = command.raw.lower()
        if any(word in lowered for word in _VAGUE_WORDS):
            warnings.append(
                f"Command is ambiguous: it refers to the selection ({selection}) "
                "instead of naming a range"
            )
    if not requires_confirmation(command.intent):
        return warnings

    if command.intent is CommandIntent.DELETE_ROW:
        if "row" not in params:
            warnings.append("Command is ambiguous: no row number was given")
        elif command.used_context:
            warnings.append(
                f"Command is ambiguous: row {params['row']} was taken from the "
                "current selection"
            )
    elif command.intent is CommandIntent.DELETE_COLUMN:
        if "column" not in params:
            warnings.append("Command is ambiguous: no column was given")
        elif command.used_context:
            warnings.append(
                "Command is ambiguous: the column was taken from the current selection"
            )
    elif command.intent is CommandIntent.FIND_REPLACE and "range" not in params:
        warnings.append(
            "Command is ambiguous: no range was given, so the whole worksheet "
            "will be searched"
        )
    return warnings
