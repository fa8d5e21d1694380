"""Pure conversions from raw command tokens to typed parameter values."""

from __future__ import annotations

import math
import re
from typing import Any

CELL_REFERENCE_PATTERN = re.compile(r"^[A-Z]+[0-9]+$")
RANGE_REFERENCE_PATTERN = re.compile(r"^[A-Z]+[0-9]+:[A-Z]+[0-9]+$")
_CELL_PARTS_PATTERN = re.compile(r"^([A-Za-z]+)([0-9]+)$")

# Later entries override earlier ones when several keywords appear.
_FORMAT_KEYWORDS: tuple[tuple[tuple[str, ...], dict[str, Any]], ...] = (
    (("currency",), {"number_format": "$#,##0.00"}),
    (("percentage", "percent"), {"number_format": "0.00%"}),
    (("date",), {"number_format": "yyyy-mm-dd"}),
    (("bold",), {"bold": True}),
    (("italic",), {"italic": True}),
    (("red",), {"font_color": "#FF0000"}),
    (("blue",), {"font_color": "#0000FF"}),
    (("green",), {"font_color": "#00FF00"}),
)

_FILTER_OPERATORS: tuple[tuple[str, str], ...] = (
    ("does not contain", "not_contains"),
    ("not contains", "not_contains"),
    ("contains", "contains"),
    ("is not", "not_equals"),
    ("not equals", "not_equals"),
    ("!=", "not_equals"),
    ("greater than", "greater_than"),
    ("more than", "greater_than"),
    (">", "greater_than"),
    ("less than", "less_than"),
    ("<", "less_than"),
    ("equals", "equals"),
    ("is", "equals"),
    ("==", "equals"),
    ("=", "equals"),
)
_FILTER_PATTERN = re.compile(
    r"^(?:column )?(?P<column>[a-z]{1,3}) (?P<operator>"
    + "|".join(re.escape(symbol) for symbol, _ in _FILTER_OPERATORS)
    + r") (?P<value>.+)$",
    re.IGNORECASE,
)


def normalize_cell_reference(ref: str) -> str:
    """Uppercase a cell reference without validating it."""
    return ref.strip().upper()


def normalize_range_reference(ref: str) -> str:
    """Uppercase a range reference without validating it."""
    return ref.strip().upper()


def is_valid_cell_reference(ref: str) -> bool:
    return bool(CELL_REFERENCE_PATTERN.match(ref))


def is_valid_range_reference(ref: str) -> bool:
    return bool(RANGE_REFERENCE_PATTERN.match(ref))


def widen_to_range(ref: str) -> str:
    """Turn a single-cell reference into a one-cell range (`A1` -> `A1:A1`)."""
    if ":" in ref:
        return ref
    return f"{ref}:{ref}"


def parse_value(raw: str) -> Any:
    """Coerce text into a number, a boolean, or leave it as a string.

    Numeric coercion wins, so `"100"` becomes `100` and `"007"` becomes `7`.

    Args:
        raw: Captured value text.

    Returns:
        Int for integral numbers, float for other finite numbers, bool for
        `true`/`false`, otherwise the original string.
    """
    text = raw.strip()
    number = _parse_number(text)
    if number is not None:
        return number
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return raw


def _parse_number(text: str) -> int | float | None:
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer() and re.fullmatch(r"[+-]?\d+", text):
        return int(text)
    return number


def column_letter_to_number(letter: str) -> int:
    """Convert column letters to a 0-based index (`A` -> 0, `AA` -> 26).

    Raises:
        ValueError: If `letter` contains anything other than A-Z.
    """
    upper = letter.strip().upper()
    if not upper.isalpha() or not upper.isascii():
        raise ValueError(f"Invalid column letter: {letter!r}")
    result = 0
    for char in upper:
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def column_number_to_letter(index: int) -> str:
    """Convert a 0-based column index back to letters (`26` -> `AA`)."""
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}")
    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def split_cell_reference(ref: str) -> tuple[int, int]:
    """Split `B7` into `(1, 7)`: 0-based column index and 1-based row.

    Raises:
        ValueError: If `ref` is not a single cell reference.
    """
    match = _CELL_PARTS_PATTERN.match(ref.strip())
    if match is None:
        raise ValueError(f"Invalid cell reference: {ref}")
    return column_letter_to_number(match.group(1)), int(match.group(2))


def selection_anchor(selection: str) -> tuple[int, int] | None:
    """Return the top-left cell of a selection, or None when unparseable."""
    first = selection.split(":", 1)[0]
    try:
        return split_cell_reference(first)
    except ValueError:
        return None


def normalize_formula(formula: str) -> str:
    """Strip a formula and guarantee a leading `=`."""
    text = formula.strip()
    return text if text.startswith("=") else f"={text}"


def parse_format(text: str) -> dict[str, Any]:
    """Map a format phrase to a cell format payload.

    Keywords are matched as case-insensitive substrings. Formats are not
    composed: `"bold red"` yields only the font color.

    Args:
        text: Format phrase such as `"currency"` or `"bold"`.

    Returns:
        Format mapping, empty when no keyword matched.
    """
    lowered = text.lower()
    selected: dict[str, Any] = {}
    for keywords, fmt in _FORMAT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            selected = dict(fmt)
    return selected


def parse_filter_criteria(text: str) -> dict[str, Any]:
    """Parse `B > 100` / `column C contains north` style filter criteria.

    Anything that does not name a column and operator falls back to a
    `contains` match without a column, which addresses the range's first
    column.
    """
    stripped = text.strip()
    match = _FILTER_PATTERN.match(stripped)
    if match is not None:
        symbol = match.group("operator").lower()
        operator = next(name for sym, name in _FILTER_OPERATORS if sym == symbol)
        return {
            "column": column_letter_to_number(match.group("column")),
            "operator": operator,
            "value": parse_value(match.group("value")),
        }
    return {"operator": "contains", "value": stripped}


def range_columns(ref: str) -> tuple[int, int] | None:
    """Return the `(first, last)` 0-based columns of a range, or None when malformed."""
    start, _, end = ref.partition(":")
    try:
        start_column, _ = split_cell_reference(start)
        end_column, _ = split_cell_reference(end or start)
    except ValueError:
        return None
    return min(start_column, end_column), max(start_column, end_column)


def range_shape(ref: str) -> tuple[int, int] | None:
    """Return `(rows, columns)` covered by a range, or None when malformed."""
    start, _, end = ref.partition(":")
    try:
        start_column, start_row = split_cell_reference(start)
        end_column, end_row = split_cell_reference(end or start)
    except ValueError:
        return None
    return abs(end_row - start_row) + 1, abs(end_column - start_column) + 1


def parse_values(text: str, ref: str | None = None) -> list[list[Any]]:
    """Parse `1, 2; 3, 4` into a 2D grid of typed values.

    Rows are separated by `;` or `|`, cells by `,`. A single value is
    repeated over the whole range when `ref` is given.

    Args:
        text: Captured values text.
        ref: Optional target range used to expand a single fill value.

    Returns:
        Row-major grid of parsed values.
    """
    rows = [
        [parse_value(cell.strip()) for cell in row.split(",")]
        for row in re.split(r"[;|]", text)
        if row.strip()
    ]
    shape = range_shape(ref) if ref else None
    if shape is not None and len(rows) == 1 and len(rows[0]) == 1:
        row_count, column_count = shape
        return [[rows[0][0]] * column_count for _ in range(row_count)]
    return rows
