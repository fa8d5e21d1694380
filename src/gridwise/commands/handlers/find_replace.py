"""Handler for find_replace."""

from __future__ import annotations

import logging
import re

from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.errors import ErrorCode, WorkbookError
from gridwise.session.models import Operation, OperationType
from gridwise.workbook.protocol import FindMatch, FindOptions, SpreadsheetCollaborator

_LOGGER = logging.getLogger(__name__)


class FindReplaceCommand:
    """Deterministic `find_replace` handler.

    Matches are replaced one cell at a time in the collaborator's find order.
    Each replacement commits on its own, so a failure part-way through
    reports exactly the cells already rewritten.
    """

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Find every match and rewrite each matched cell.

        Args:
            command: Validated, confirmed parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Envelope with one `set_value` operation per replaced cell; always
            flagged as confirmation-gated.
        """
        params = command.parameters
        find = params["find"]
        replacement = params["replace"]
        ref = params.get("range")
        options = FindOptions(
            match_case=bool(params.get("match_case", False)),
            match_entire_cell=bool(params.get("match_entire_cell", False)),
            range=ref,
        )
        matches = workbook.find_all(find, options)
        needle = re.compile(re.escape(find), 0 if options.match_case else re.IGNORECASE)

        operations: list[Operation] = []
        for match in matches:
            new_value = _replaced(match, needle, replacement, options)
            try:
                workbook.set_cell(match.cell, new_value)
            except Exception as exc:
                _LOGGER.exception(
                    "find_replace.failed cell=%s committed=%d", match.cell, len(operations)
                )
                code = (
                    ErrorCode.WORKBOOK_ERROR
                    if isinstance(exc, WorkbookError)
                    else ErrorCode.EXECUTION_FAILED
                )
                return AIResponse.failure(
                    str(exc),
                    message=(
                        f"Replaced {len(operations)} of {len(matches)} occurrence(s) "
                        f"before failing at {match.cell}"
                    ),
                    code=code.value,
                    operations=operations,
                    requires_confirmation=True,
                )
            operations.append(
                Operation(
                    type=OperationType.SET_VALUE,
                    target=match.cell,
                    value=new_value,
                    old_value=match.value,
                )
            )

        scope = ref or "the whole worksheet"
        _LOGGER.info("find_replace.done scope=%s count=%d", scope, len(operations))
        return AIResponse.ok(
            f'Replaced {len(operations)} occurrence(s) of "{find}" with '
            f'"{replacement}" in {scope}',
            operations=operations,
            requires_confirmation=True,
            code="text_replaced",
        )


def _replaced(
    match: FindMatch, needle: re.Pattern[str], replacement: str, options: FindOptions
) -> str:
    if options.match_entire_cell:
        return replacement
    return needle.sub(lambda _: replacement, str(match.value))
