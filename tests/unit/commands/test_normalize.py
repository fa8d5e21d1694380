"""Unit tests for parameter normalization helpers."""

from __future__ import annotations

import pytest

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
    range_shape,
    selection_anchor,
    split_cell_reference,
    widen_to_range,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("letter", "expected"),
    [("A", 0), ("Z", 25), ("AA", 26), ("AZ", 51), ("BA", 52), ("a", 0)],
)
def test_column_letter_to_number(letter: str, expected: int) -> None:
    """Column letters should map to 0-based spreadsheet column indices."""
    assert column_letter_to_number(letter) == expected


@pytest.mark.unit
def test_column_number_to_letter_inverts_letter_conversion() -> None:
    """Index-to-letter conversion should invert letter-to-index conversion."""
    for letters in ("A", "Z", "AA", "AZ", "ZZ", "AAA"):
        assert column_number_to_letter(column_letter_to_number(letters)) == letters


@pytest.mark.unit
def test_column_letter_to_number_rejects_non_letters() -> None:
    """Digits or punctuation in a column should raise ValueError."""
    with pytest.raises(ValueError, match="Invalid column letter"):
        column_letter_to_number("A1")


@pytest.mark.unit
def test_reference_normalizers_uppercase_without_validating() -> None:
    """Normalizers should uppercase but never reject malformed input."""
    assert normalize_cell_reference(" b7 ") == "B7"
    assert normalize_range_reference("a1:c3") == "A1:C3"
    assert normalize_cell_reference("1a") == "1A"


@pytest.mark.unit
def test_reference_validators() -> None:
    """Validators should accept only uppercase A1 and A1:B2 shapes."""
    assert is_valid_cell_reference("AA10")
    assert not is_valid_cell_reference("1A")
    assert not is_valid_cell_reference("a1")
    assert is_valid_range_reference("A1:B10")
    assert not is_valid_range_reference("A1")
    assert not is_valid_range_reference("A1:B")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("100", 100),
        ("-3", -3),
        ("2.5", 2.5),
        ("007", 7),
        ("TRUE", True),
        ("false", False),
        ("hello world", "hello world"),
        ("nan", "nan"),
        ("inf", "inf"),
    ],
)
def test_parse_value_prefers_numbers_then_booleans(raw: str, expected: object) -> None:
    """Numeric coercion should win, then booleans, then the raw string."""
    parsed = parse_value(raw)

    assert parsed == expected
    assert type(parsed) is type(expected)


@pytest.mark.unit
def test_parse_format_keywords() -> None:
    """Format phrases should map to structural format payloads."""
    assert parse_format("currency") == {"number_format": "$#,##0.00"}
    assert parse_format("Percent") == {"number_format": "0.00%"}
    assert parse_format("a date") == {"number_format": "yyyy-mm-dd"}
    assert parse_format("bold") == {"bold": True}
    assert parse_format("italic") == {"italic": True}
    assert parse_format("blue") == {"font_color": "#0000FF"}
    assert parse_format("sparkly") == {}


@pytest.mark.unit
def test_parse_format_does_not_compose_keywords() -> None:
    """Only the last matching table entry should be applied."""
    assert parse_format("bold red") == {"font_color": "#FF0000"}
    assert parse_format("currency in bold") == {"bold": True}


@pytest.mark.unit
def test_normalize_formula_adds_leading_equals() -> None:
    """Formulas should always start with a single '='."""
    assert normalize_formula("SUM(A1:A10)") == "=SUM(A1:A10)"
    assert normalize_formula(" =A1*2 ") == "=A1*2"


@pytest.mark.unit
def test_parse_filter_criteria_operators() -> None:
    """Column/operator/value criteria should be recognized."""
    assert parse_filter_criteria("B > 100") == {
        "column": 1,
        "operator": "greater_than",
        "value": 100,
    }
    assert parse_filter_criteria("column C contains north") == {
        "column": 2,
        "operator": "contains",
        "value": "north",
    }
    assert parse_filter_criteria("a is not done") == {
        "column": 0,
        "operator": "not_equals",
        "value": "done",
    }


@pytest.mark.unit
def test_parse_filter_criteria_falls_back_to_contains() -> None:
    """Free text should become a column-less contains match."""
    assert parse_filter_criteria("status") == {
        "operator": "contains",
        "value": "status",
    }


@pytest.mark.unit
def test_split_cell_reference_and_selection_anchor() -> None:
    """Cells should split into 0-based column and 1-based row."""
    assert split_cell_reference("B7") == (1, 7)
    assert selection_anchor("C5:D9") == (2, 5)
    assert selection_anchor("not a ref") is None


@pytest.mark.unit
def test_widen_to_range_and_shape() -> None:
    """Single cells should widen to one-cell ranges with a 1x1 shape."""
    assert widen_to_range("A1") == "A1:A1"
    assert widen_to_range("A1:B2") == "A1:B2"
    assert range_shape("A1:C2") == (2, 3)
    assert range_shape("B3:A1") == (3, 2)
    assert range_shape("oops") is None


@pytest.mark.unit
def test_parse_values_grid_and_fill() -> None:
    """Value text should become a typed 2D grid, or fill a range shape."""
    assert parse_values("1, 2; 3, 4") == [[1, 2], [3, 4]]
    assert parse_values("a, true | 2.5, x") == [["a", True], [2.5, "x"]]
    assert parse_values("0", "A1:B2") == [[0, 0], [0, 0]]
