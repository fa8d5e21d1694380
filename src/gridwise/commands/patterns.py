"""Priority-ordered intent pattern table.

Intents are tried top to bottom and patterns within an intent in order; the
first match wins. Range intents sit above their single-cell counterparts so a
range such as `A1:B10` is never captured as the cell `A1`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from gridwise.commands.types import CommandIntent

CELL = r"(?<![\w:])[a-z]+\d+(?![\w:])"
RANGE = r"(?<![\w:])[a-z]+\d+:[a-z]+\d+(?![\w:])"
REF = r"(?<![\w:])[a-z]+\d+(?::[a-z]+\d+)?(?![\w:])"
COLUMN = r"[a-z]{1,3}\b"
COMMENT_ID = r"[a-z0-9][a-z0-9-]*"

# Deictic references resolved against the caller's current selection.
CTX = (
    r"(?:the (?:current )?selection|the selected (?:cells|range|data)"
    r"|selected (?:cells|range|data)|the current (?:cells|cell|range)"
    r"|selection|selected|this (?:cell|range|data)|these cells|these|this|it)\b"
)
CELL_CTX = r"(?:this cell|the selected cell|selected cell|the current cell)\b"
ROW_CTX = r"(?:this|the selected|selected|the current|current)"

FIND_FLAGS = (
    r"(?P<flags>(?:,? (?:matching case|match case|case sensitive"
    r"|whole cells?|entire cells?))*)"
)


@dataclass(frozen=True)
class IntentPattern:
    """One intent and its ordered, compiled patterns."""

    intent: CommandIntent
    patterns: tuple[re.Pattern[str], ...]


@dataclass(frozen=True)
class IntentMatch:
    """Matched intent with its named captures (missing groups omitted)."""

    intent: CommandIntent
    groups: dict[str, str]
    pattern: str


def _compile(*sources: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(source, re.IGNORECASE) for source in sources)


INTENT_PATTERNS: tuple[IntentPattern, ...] = (
    IntentPattern(
        CommandIntent.READ_RANGE,
        _compile(
            rf"\b(?:get|read|show) (?:the )?(?:values? (?:of|in|from) )?(?P<range>{RANGE})",
            rf"(?P<range>{RANGE}) values?\b",
            r"\b(?:get|read|show) (?:the )?(?P<ctx>selected) values\b",
            rf"\b(?:get|read|show) (?:the )?values? (?:of|in|from) (?P<ctx>{CTX})$",
        ),
    ),
    IntentPattern(
        CommandIntent.READ_CELL,
        _compile(
            rf"\b(?:get|read|show|what(?:'s| is)) (?:the )?(?:value (?:of|in|at) )?(?P<cell>{CELL})",
            rf"(?P<cell>{CELL}) value\b",
            rf"\b(?:get|read|show|what(?:'s| is)) (?:the )?value (?:of|in|at) (?P<ctx>{CELL_CTX}|this\b)",
        ),
    ),
    IntentPattern(
        CommandIntent.WRITE_RANGE,
        _compile(
            rf"\bwrite (?:data|values) to (?P<range>{RANGE})",
            rf"\bfill (?P<range>{RANGE}) with (?P<values>.+)",
            rf"\bwrite (?P<values>.+?) (?:to|into) (?P<range>{RANGE})",
        ),
    ),
    IntentPattern(
        CommandIntent.WRITE_CELL,
        _compile(
            rf"\bset (?P<cell>{CELL}) to (?P<value>.+)",
            rf"\bwrite (?P<value>.+?) (?:to|in|at|into) (?P<cell>{CELL})",
            rf"\bput (?P<value>.+?) in (?P<cell>{CELL})",
            rf"\bset (?P<ctx>{CELL_CTX}) to (?P<value>.+)",
            rf"\bput (?P<value>.+?) in (?P<ctx>{CELL_CTX})",
        ),
    ),
    IntentPattern(
        CommandIntent.SET_FORMULA,
        _compile(
            rf"\b(?:calculate|compute|set formula) (?P<formula>.+?) in (?P<cell>{CELL})",
            rf"(?P<cell>{CELL}) (?:=|equals) (?P<formula>.+)",
            rf"\bformula (?P<formula>.+?) in (?P<cell>{CELL})",
            rf"\b(?:calculate|compute|set formula) (?P<formula>.+?) in (?P<ctx>{CELL_CTX}|this\b)",
        ),
    ),
    IntentPattern(
        CommandIntent.FORMAT_CELLS,
        _compile(
            rf"\bformat (?:(?P<range>{REF})|(?P<ctx>{CTX})) as (?P<format>.+)",
            rf"\bapply (?P<format>.+?) format(?:ting)? to (?:(?P<range>{REF})|(?P<ctx>{CTX}))",
            rf"\bmake (?:(?P<range>{REF})|(?P<ctx>{CTX})) (?P<format>.+)",
        ),
    ),
    IntentPattern(
        CommandIntent.SORT_DATA,
        _compile(
            rf"\bsort (?:(?P<range>{RANGE})|(?P<ctx>{CTX})) by (?:column )?(?P<column>{COLUMN})"
            r"(?: (?P<order>ascending|descending))?",
            rf"\bsort (?:(?P<range>{RANGE})|(?P<ctx>{CTX}))(?: in)? (?P<order>ascending|descending)\b",
            rf"\bsort (?:(?P<range>{RANGE})|(?P<ctx>{CTX}))$",
        ),
    ),
    IntentPattern(
        CommandIntent.FILTER_DATA,
        _compile(
            rf"\bfilter (?:(?P<range>{RANGE})|(?P<ctx>{CTX})) (?:where|by|for) (?P<criteria>.+)",
            rf"\bshow (?:only )?(?P<criteria>.+?) in (?P<range>{RANGE})",
        ),
    ),
    IntentPattern(
        CommandIntent.CREATE_CHART,
        _compile(
            r"\bcreate (?:a |an )?(?:(?P<type>[a-z]+) )?chart"
            rf"(?: (?:from|of|using|for) (?:(?P<range>{RANGE})|(?P<ctx>{CTX})))?",
            rf"\bchart (?P<range>{RANGE}) as (?:a |an )?(?P<type>[a-z]+)",
            rf"\b(?:plot|graph) (?:(?P<range>{RANGE})|(?P<ctx>{CTX}))"
            r"(?: as (?:a |an )?(?P<type>[a-z]+)(?: chart)?)?",
        ),
    ),
    IntentPattern(
        CommandIntent.ANALYZE_DATA,
        _compile(
            rf"\banalyze (?:the )?(?:data (?:in|from|of) )?(?P<range>{RANGE})",
            rf"\b(?:get|show) (?:the )?(?:statistics|stats|summary) (?:of|for) (?P<range>{RANGE})",
            rf"\banalyze(?: (?:the )?data)?(?: (?:in|from|of))?(?: (?P<ctx>{CTX}))?$",
            rf"\b(?:get|show) (?:the )?(?:statistics|stats|summary)(?: (?:of|for) (?P<ctx>{CTX}))?$",
        ),
    ),
    IntentPattern(
        CommandIntent.INSERT_ROW,
        _compile(
            r"\b(?:insert|add) (?:a )?(?:new )?row (?:at|before|above) (?:row )?(?P<row>\d+)\b",
            rf"\b(?:insert|add) (?:a )?(?:new )?row (?:at|before|above) (?P<ctx>{CTX})",
            r"\b(?:insert|add) (?:a )?(?:new )?row$",
        ),
    ),
    IntentPattern(
        CommandIntent.DELETE_ROW,
        _compile(
            r"\b(?:delete|remove) row (?P<row>\d+)\b",
            rf"\b(?:delete|remove) (?P<ctx>{ROW_CTX}) row\b",
            r"\b(?:delete|remove) (?:the |a )?row$",
        ),
    ),
    IntentPattern(
        CommandIntent.INSERT_COLUMN,
        _compile(
            r"\b(?:insert|add) (?:a )?(?:new )?column (?:at|before) "
            rf"(?:column )?(?P<column>{COLUMN})",
            r"\b(?:insert|add) (?:a )?(?:new )?column$",
        ),
    ),
    IntentPattern(
        CommandIntent.DELETE_COLUMN,
        _compile(
            rf"\b(?:delete|remove) column (?P<column>{COLUMN})",
            rf"\b(?:delete|remove) (?P<ctx>{ROW_CTX}) column\b",
            r"\b(?:delete|remove) (?:the |a )?column$",
        ),
    ),
    IntentPattern(
        CommandIntent.FIND_REPLACE,
        _compile(
            r"\b(?:find|search for) (?P<find>.+?) (?:and )?replace (?:it |them )?"
            r"(?:with|by) (?P<replace>.+?)"
            rf"(?: in (?:(?P<range>{RANGE})|(?P<ctx>{CTX})))?{FIND_FLAGS}$",
            r"\breplace (?:all )?(?P<find>.+?) with (?P<replace>.+?)"
            rf"(?: in (?:(?P<range>{RANGE})|(?P<ctx>{CTX})))?{FIND_FLAGS}$",
        ),
    ),
    IntentPattern(
        CommandIntent.ADD_COMMENT,
        _compile(
            rf"\b(?:add|create) (?:a )?comment (?:to|on|at) (?:(?P<cell>{CELL})|(?P<ctx>{CELL_CTX}|this\b))"
            r"(?: saying| with)?:? (?P<content>.+)",
            rf"\bcomment (?:on|at) (?P<cell>{CELL}):? (?P<content>.+)",
        ),
    ),
    IntentPattern(
        CommandIntent.REPLY_COMMENT,
        _compile(
            rf"\breply to comment (?P<comment_id>{COMMENT_ID})(?: with| saying)?:? (?P<content>.+)",
            rf"\badd reply to (?P<comment_id>{COMMENT_ID}):? (?P<content>.+)",
        ),
    ),
    IntentPattern(
        CommandIntent.RESOLVE_COMMENT,
        _compile(
            rf"\bresolve comment (?P<comment_id>{COMMENT_ID})",
            rf"\bmark comment (?P<comment_id>{COMMENT_ID}) as resolved",
        ),
    ),
    IntentPattern(
        CommandIntent.DELETE_COMMENT,
        _compile(
            rf"\b(?:delete|remove) comment (?P<comment_id>{COMMENT_ID})",
        ),
    ),
    IntentPattern(
        CommandIntent.GET_COMMENTS,
        _compile(
            r"\b(?:get|show|list) (?:all )?(?:the )?comments\b",
            r"\bwhat comments (?:are there|exist)",
        ),
    ),
)


def match_intent(
    text: str, table: tuple[IntentPattern, ...] = INTENT_PATTERNS
) -> IntentMatch | None:
    """Return the first intent whose pattern matches `text`.

    Args:
        text: Whitespace-normalized command text.
        table: Ordered pattern table.

    Returns:
        Match with captured groups, or None when nothing matches.
    """
    for entry in table:
        for pattern in entry.patterns:
            match = pattern.search(text)
            if match is None:
                continue
            groups = {
                name: value
                for name, value in match.groupdict().items()
                if value is not None
            }
            return IntentMatch(intent=entry.intent, groups=groups, pattern=pattern.pattern)
    return None
