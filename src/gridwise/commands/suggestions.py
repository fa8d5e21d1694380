"""Canonical command catalogue used for help and unknown-command hints."""

from __future__ import annotations

import re

from gridwise.commands.types import CommandSuggestion

COMMAND_CATALOGUE: tuple[CommandSuggestion, ...] = (
    CommandSuggestion(
        command="Set [cell] to [value]",
        description="Set a cell value",
        example="Set A1 to 100",
    ),
    CommandSuggestion(
        command="Get value of [cell]",
        description="Read a cell value",
        example="Get value of B2",
    ),
    CommandSuggestion(
        command="Get values of [range]",
        description="Read values from a range",
        example="Get values of A1:B10",
    ),
    CommandSuggestion(
        command="Fill [range] with [values]",
        description="Write values to a range",
        example="Fill A1:B2 with 1, 2; 3, 4",
    ),
    CommandSuggestion(
        command="Calculate [formula] in [cell]",
        description="Set a formula",
        example="Calculate SUM(A1:A10) in A11",
    ),
    CommandSuggestion(
        command="Format [range] as [format]",
        description="Apply formatting",
        example="Format B1:B10 as currency",
    ),
    CommandSuggestion(
        command="Sort [range] by column [column]",
        description="Sort data",
        example="Sort A1:C10 by column A",
    ),
    CommandSuggestion(
        command="Filter [range] where [criteria]",
        description="Filter data",
        example="Filter A1:C10 where B > 100",
    ),
    CommandSuggestion(
        command="Create [chart type] chart from [range]",
        description="Create a chart",
        example="Create line chart from A1:B10",
    ),
    CommandSuggestion(
        command="Analyze data in [range]",
        description="Analyze data",
        example="Analyze data in A1:D100",
    ),
    CommandSuggestion(
        command="Insert row at [row]",
        description="Insert a row",
        example="Insert row at 5",
    ),
    CommandSuggestion(
        command="Delete row [row]",
        description="Delete a row",
        example="Delete row 7",
    ),
    CommandSuggestion(
        command="Insert column at [column]",
        description="Insert a column",
        example="Insert column at C",
    ),
    CommandSuggestion(
        command="Delete column [column]",
        description="Delete a column",
        example="Delete column D",
    ),
    CommandSuggestion(
        command="Replace [text] with [text] in [range]",
        description="Find and replace text",
        example="Replace old with new in A1:C10",
    ),
    CommandSuggestion(
        command="Add comment to [cell] saying [text]",
        description="Add a comment",
        example="Add comment to A1 saying check this total",
    ),
    CommandSuggestion(
        command="Reply to comment [id] with [text]",
        description="Reply to a comment",
        example="Reply to comment c1 with fixed",
    ),
    CommandSuggestion(
        command="Show comments",
        description="List all comments",
        example="Show all comments",
    ),
)

_STOP_WORDS = frozenset(
    {"the", "and", "for", "with", "from", "into", "this", "that", "please", "can"}
)


def filter_suggestions(
    partial: str,
    catalogue: tuple[CommandSuggestion, ...] = COMMAND_CATALOGUE,
) -> list[CommandSuggestion]:
    """Return catalogue entries containing `partial` (case-insensitive).

    Args:
        partial: Partial command text; blank returns the whole catalogue.
        catalogue: Suggestion catalogue.

    Returns:
        Matching entries in catalogue order.
    """
    needle = partial.strip().lower()
    if not needle:
        return list(catalogue)
    return [
        entry
        for entry in catalogue
        if needle in entry.command.lower()
        or needle in entry.description.lower()
        or needle in entry.example.lower()
    ]


def rank_suggestions(
    text: str,
    *,
    limit: int = 3,
    catalogue: tuple[CommandSuggestion, ...] = COMMAND_CATALOGUE,
) -> list[CommandSuggestion]:
    """Rank catalogue entries by keyword overlap with unparsed text.

    Ties keep catalogue order. Entries sharing no keyword are dropped.
    """
    keywords = {
        word
        for word in re.findall(r"[a-z]+", text.lower())
        if len(word) > 2 and word not in _STOP_WORDS
    }
    if not keywords or limit <= 0:
        return []
    scored: list[tuple[int, int, CommandSuggestion]] = []
    for position, entry in enumerate(catalogue):
        haystack = " ".join((entry.command, entry.description, entry.example))
        words = set(re.findall(r"[a-z]+", haystack.lower()))
        score = len(keywords & words)
        if score:
            scored.append((-score, position, entry))
    scored.sort()
    return [entry for _, _, entry in scored[:limit]]
