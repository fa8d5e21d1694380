"""Unit tests for command parsing and context resolution."""

from __future__ import annotations

import pytest

from gridwise.commands.parser import CommandParser
from gridwise.commands.types import CommandIntent, CommandSuggestion
from gridwise.session.models import AIContext


def _context(selection: str) -> AIContext:
    return AIContext(
        current_workbook="book",
        current_worksheet="Sheet1",
        current_selection=selection,
    )


@pytest.mark.unit
def test_parse_normalizes_references_and_values() -> None:
    """Lowercase references are uppercased and values are typed."""
    # Arrange - parser with default table
    parser = CommandParser()

    # Act - parse a shouted command with a lowercase cell
    command = parser.parse("SET a1 TO 5")

    # Assert - normalized parameters and metadata
    assert command.intent is CommandIntent.WRITE_CELL
    assert command.parameters == {"cell": "A1", "value": 5}
    assert command.target_range == "A1"
    assert command.requires_confirmation is False
    assert command.used_context is False
    assert command.raw == "SET a1 TO 5"


@pytest.mark.unit
def test_parse_collapses_whitespace() -> None:
    """Runs of whitespace should not affect matching."""
    command = CommandParser().parse("  set   B2\tto   true ")

    assert command.intent is CommandIntent.WRITE_CELL
    assert command.parameters == {"cell": "B2", "value": True}


@pytest.mark.unit
def test_parse_formula_keeps_case_and_adds_equals() -> None:
    """Formula text keeps its casing and gains a leading '='."""
    command = CommandParser().parse("calculate sum(A1:A10) in a11")

    assert command.intent is CommandIntent.SET_FORMULA
    assert command.parameters == {"formula": "=sum(A1:A10)", "cell": "A11"}


@pytest.mark.unit
def test_parse_range_write_builds_grid() -> None:
    """Range writes carry a typed 2D grid, filling single values."""
    parser = CommandParser()

    grid = parser.parse("fill a1:b2 with 1, 2; 3, 4")
    fill = parser.parse("Fill A1:B2 with 7")

    assert grid.parameters == {"range": "A1:B2", "values": [[1, 2], [3, 4]]}
    assert fill.parameters["values"] == [[7, 7], [7, 7]]


@pytest.mark.unit
def test_parse_format_widens_single_cell() -> None:
    """A single-cell format target becomes a one-cell range."""
    command = CommandParser().parse("format b3 as bold")

    assert command.intent is CommandIntent.FORMAT_CELLS
    assert command.parameters == {"range": "B3:B3", "format": {"bold": True}}
    assert command.target_range == "B3:B3"


@pytest.mark.unit
def test_parse_sort_options() -> None:
    """Sort commands carry a named column index and direction, ascending by default."""
    parser = CommandParser()

    explicit = parser.parse("Sort A1:C10 by column B descending")
    default = parser.parse("sort A1:C10")

    assert explicit.parameters["options"] == {"column": 1, "ascending": False}
    assert default.parameters["options"] == {"ascending": True}


@pytest.mark.unit
def test_parse_chart_type_defaults_to_column() -> None:
    """Charts without a type use the column chart."""
    parser = CommandParser()

    typed = parser.parse("chart A1:B4 as Pie")
    untyped = parser.parse("create chart from A1:B4")

    assert typed.parameters["type"] == "pie"
    assert untyped.parameters == {"range": "A1:B4", "type": "column"}


@pytest.mark.unit
def test_parse_structure_positions() -> None:
    """Row numbers are ints; column letters become 0-based indices."""
    parser = CommandParser()

    row = parser.parse("delete row 7")
    column = parser.parse("insert column at C")

    assert row.parameters == {"row": 7}
    assert row.requires_confirmation is True
    assert column.parameters == {"column": 2}
    assert column.requires_confirmation is False


@pytest.mark.unit
def test_parse_find_replace_flags() -> None:
    """Find/replace keeps literal text and reads the trailing flags."""
    command = CommandParser().parse(
        "Replace Old with New in a1:c10 matching case, whole cell"
    )

    assert command.intent is CommandIntent.FIND_REPLACE
    assert command.parameters == {
        "range": "A1:C10",
        "find": "Old",
        "replace": "New",
        "match_case": True,
        "match_entire_cell": True,
    }
    assert command.requires_confirmation is True


@pytest.mark.unit
def test_parse_comment_commands() -> None:
    """Comment commands carry the target cell or id and trimmed content."""
    parser = CommandParser()

    added = parser.parse("add comment to b2 saying  Check this ")
    replied = parser.parse("reply to comment c1 with Done")

    assert added.parameters == {"cell": "B2", "content": "Check this"}
    assert replied.parameters == {"comment_id": "c1", "content": "Done"}


@pytest.mark.unit
def test_parse_unknown_attaches_ranked_suggestions() -> None:
    """Unparseable text yields `unknown` with related catalogue entries."""
    command = CommandParser().parse("draw me a chart please")

    assert command.intent is CommandIntent.UNKNOWN
    assert command.target_range is None
    suggestions = command.parameters["suggestions"]
    assert [item.example for item in suggestions] == ["Create line chart from A1:B10"]


@pytest.mark.unit
def test_parse_unknown_suggestions_respect_limit() -> None:
    """The suggestion count is capped by `max_suggestions`."""
    command = CommandParser(max_suggestions=1).parse("column row value range stuff")

    assert command.intent is CommandIntent.UNKNOWN
    assert len(command.parameters["suggestions"]) == 1


@pytest.mark.unit
def test_explicit_range_wins_over_selection() -> None:
    """An explicit reference is kept even when a selection exists."""
    command = CommandParser().parse("Format C1:C5 as bold", _context("A1:B10"))

    assert command.parameters["range"] == "C1:C5"
    assert command.parameters["context_range"] == "A1:B10"
    assert command.used_context is False


@pytest.mark.unit
def test_selection_fills_missing_range() -> None:
    """Deictic range commands resolve to the current selection."""
    command = CommandParser().parse("format the selection as bold", _context("a1:b10"))

    assert command.parameters["range"] == "A1:B10"
    assert command.parameters["context_range"] == "A1:B10"
    assert command.target_range == "A1:B10"
    assert command.used_context is True


@pytest.mark.unit
def test_single_cell_selection_is_widened_for_range_intents() -> None:
    """A one-cell selection becomes a one-cell range."""
    command = CommandParser().parse("create line chart", _context("C3"))

    assert command.parameters["range"] == "C3:C3"
    assert command.used_context is True


@pytest.mark.unit
def test_cell_intent_uses_top_left_of_selection() -> None:
    """Cell commands take the first cell of a range selection."""
    command = CommandParser().parse("set this cell to 5", _context("C3:D4"))

    assert command.parameters["cell"] == "C3"
    assert command.used_context is True


@pytest.mark.unit
def test_missing_range_without_selection_stays_missing() -> None:
    """Without a selection, deictic commands keep no range."""
    command = CommandParser().parse("format the selection as bold")

    assert "range" not in command.parameters
    assert command.used_context is False


@pytest.mark.unit
def test_row_and_column_positions_come_from_selection_anchor() -> None:
    """Row/column deictics use the selection's top-left cell."""
    parser = CommandParser()
    context = _context("C5:D9")

    row = parser.parse("delete this row", context)
    column = parser.parse("delete column", context)

    assert row.parameters["row"] == 5
    assert row.used_context is True
    assert column.parameters["column"] == 2
    assert column.used_context is True


@pytest.mark.unit
def test_find_replace_scope_resolution() -> None:
    """Find/replace scope is explicit, the selection, or the whole sheet."""
    parser = CommandParser()
    context = _context("A1:B10")

    explicit = parser.parse("replace foo with bar in C1:C3", context)
    deictic = parser.parse("replace foo with bar in the selection", context)
    unresolved = parser.parse("replace foo with bar in the selection")
    whole = parser.parse("replace foo with bar", context)

    assert explicit.parameters["range"] == "C1:C3"
    assert explicit.used_context is False
    assert deictic.parameters["range"] == "A1:B10"
    assert deictic.used_context is True
    assert unresolved.parameters["range"] is None
    assert "range" not in whole.parameters
    assert whole.used_context is False


@pytest.mark.unit
def test_get_suggestions_filters_catalogue() -> None:
    """Partial text filters catalogue entries case-insensitively."""
    parser = CommandParser()

    charts = parser.get_suggestions("CHART")
    everything = parser.get_suggestions("")

    assert [item.example for item in charts] == ["Create line chart from A1:B10"]
    assert len(everything) == 18
    assert all(isinstance(item, CommandSuggestion) for item in everything)
    assert parser.get_suggestions("xyzzy") == []
