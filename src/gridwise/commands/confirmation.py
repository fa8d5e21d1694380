"""Confirmation gate policy for destructive intents."""

from __future__ import annotations

from gridwise.commands.normalize import column_number_to_letter
from gridwise.commands.types import CommandIntent, ParsedCommand

DESTRUCTIVE_INTENTS = frozenset(
    {
        CommandIntent.DELETE_ROW,
        CommandIntent.DELETE_COLUMN,
        CommandIntent.FIND_REPLACE,
    }
)


def requires_confirmation(intent: CommandIntent) -> bool:
    """Return whether `intent` must be confirmed before it executes.

    Depends on the intent alone, never on parameter values.
    """
    return intent in DESTRUCTIVE_INTENTS


def describe_pending(command: ParsedCommand) -> str:
    """Describe what a gated command would do once confirmed.

    Args:
        command: Validated destructive command.

    Returns:
        Confirmation prompt text.
    """
    params = command.parameters
    if command.intent is CommandIntent.DELETE_ROW:
        action = f"delete row {params.get('row')}"
    elif command.intent is CommandIntent.DELETE_COLUMN:
        column = params.get("column")
        letter = column_number_to_letter(column) if isinstance(column, int) else column
        action = f"delete column {letter}"
    elif command.intent is CommandIntent.FIND_REPLACE:
        scope = params.get("range") or "the whole worksheet"
        action = (
            f'replace "{params.get("find")}" with "{params.get("replace")}" in {scope}'
        )
    else:
        action = command.intent.value.replace("_", " ")
    return f"This will {action}. Confirm to proceed."
