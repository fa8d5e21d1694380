"""Unit tests for session context models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gridwise.session.models import AIContext, MessageRole, Operation, OperationType


def _ops(count: int) -> list[Operation]:
    return [
        Operation(type=OperationType.SET_VALUE, target=f"A{index}", value=index)
        for index in range(1, count + 1)
    ]


@pytest.mark.unit
def test_context_defaults_are_empty() -> None:
    """A fresh context has no selection and empty logs."""
    context = AIContext()

    assert context.current_selection == ""
    assert context.recent_operations == []
    assert context.conversation_history == []


@pytest.mark.unit
def test_merged_applies_patch_without_mutating() -> None:
    """Merging returns a new context and leaves the original untouched."""
    original = AIContext(current_workbook="book", current_selection="A1")

    merged = original.merged({"current_selection": "B2:C3"})

    assert merged.current_selection == "B2:C3"
    assert merged.current_workbook == "book"
    assert original.current_selection == "A1"


@pytest.mark.unit
def test_merged_with_context_only_applies_set_fields() -> None:
    """A partial context patch only overrides fields it set explicitly."""
    original = AIContext(current_workbook="book", current_worksheet="Data")

    merged = original.merged(AIContext(current_selection="A1:A3"))

    assert merged.current_workbook == "book"
    assert merged.current_worksheet == "Data"
    assert merged.current_selection == "A1:A3"


@pytest.mark.unit
def test_merged_rejects_unknown_fields() -> None:
    """Unknown patch keys fail validation."""
    with pytest.raises(ValidationError):
        AIContext().merged({"selection": "A1"})


@pytest.mark.unit
def test_merged_applies_bounds() -> None:
    """Oversized patched logs are truncated at the head."""
    merged = AIContext().merged(
        {"recent_operations": _ops(5)}, max_recent_operations=2
    )

    assert [op.target for op in merged.recent_operations] == ["A4", "A5"]


@pytest.mark.unit
def test_with_operations_keeps_newest_entries() -> None:
    """The operation log drops its oldest entries past the bound."""
    context = AIContext().with_operations(_ops(3), max_recent_operations=10)

    trimmed = context.with_operations(_ops(2), max_recent_operations=4)

    assert len(context.recent_operations) == 3
    assert [op.target for op in trimmed.recent_operations] == ["A2", "A3", "A1", "A2"]


@pytest.mark.unit
def test_with_message_appends_bounded_history() -> None:
    """Conversation history is append-only and bounded."""
    context = AIContext()
    for index in range(4):
        context = context.with_message(
            MessageRole.USER, f"command {index}", max_conversation_history=3
        )

    assert [message.content for message in context.conversation_history] == [
        "command 1",
        "command 2",
        "command 3",
    ]
    assert all(
        message.role is MessageRole.USER for message in context.conversation_history
    )


@pytest.mark.unit
def test_operations_are_immutable() -> None:
    """Audit records cannot be edited after creation."""
    operation = _ops(1)[0]

    with pytest.raises(ValidationError):
        operation.target = "Z9"  # type: ignore[misc]
