"""Session context models shared between the caller and the engine."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MAX_RECENT_OPERATIONS = 10
DEFAULT_MAX_CONVERSATION_HISTORY = 20


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MessageRole(StrEnum):
    """Supported conversation roles."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(BaseModel):
    """Single conversation event."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_utc_now)


class OperationType(StrEnum):
    """Audit record categories produced by write handlers."""

    SET_VALUE = "set_value"
    SET_FORMULA = "set_formula"
    SET_STYLE = "set_style"
    INSERT_ROW = "insert_row"
    DELETE_ROW = "delete_row"
    INSERT_COLUMN = "insert_column"
    DELETE_COLUMN = "delete_column"
    SORT = "sort"
    FILTER = "filter"
    CREATE_CHART = "create_chart"
    ADD_COMMENT = "add_comment"
    REPLY_COMMENT = "reply_comment"
    RESOLVE_COMMENT = "resolve_comment"
    DELETE_COMMENT = "delete_comment"


class Operation(BaseModel):
    """Immutable audit record for one applied change."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    type: OperationType
    target: str
    value: Any = None
    old_value: Any = None
    timestamp: datetime = Field(default_factory=_utc_now)


class AIContext(BaseModel):
    """Caller-owned session state consulted while parsing commands.

    `recent_operations` and `conversation_history` are append-only logs that
    drop their oldest entries once the configured bound is exceeded.
    """

    model_config = ConfigDict(extra="forbid")

    current_workbook: str = ""
    current_worksheet: str = ""
    current_selection: str = ""
    recent_operations: list[Operation] = Field(default_factory=list)
    conversation_history: list[Message] = Field(default_factory=list)

    def merged(
        self,
        patch: Mapping[str, Any] | AIContext,
        *,
        max_recent_operations: int = DEFAULT_MAX_RECENT_OPERATIONS,
        max_conversation_history: int = DEFAULT_MAX_CONVERSATION_HISTORY,
    ) -> AIContext:
        """Return a new context with patch fields applied over this one.

        Args:
            patch: Partial context mapping or a full context.
            max_recent_operations: Bound applied to the operation log.
            max_conversation_history: Bound applied to the message log.

        Returns:
            Merged, bounded context.
        """
        if isinstance(patch, AIContext):
            updates = patch.model_dump(exclude_unset=True)
        else:
            updates = dict(patch)
        payload = self.model_dump()
        payload.update(updates)
        merged = AIContext.model_validate(payload)
        return merged.bounded(
            max_recent_operations=max_recent_operations,
            max_conversation_history=max_conversation_history,
        )

    def with_operations(
        self,
        operations: Iterable[Operation],
        *,
        max_recent_operations: int = DEFAULT_MAX_RECENT_OPERATIONS,
    ) -> AIContext:
        """Return a copy with operations appended to the bounded log."""
        recent = [*self.recent_operations, *operations][-max_recent_operations:]
        return self.model_copy(update={"recent_operations": recent})

    def with_message(
        self,
        role: MessageRole,
        content: str,
        *,
        max_conversation_history: int = DEFAULT_MAX_CONVERSATION_HISTORY,
    ) -> AIContext:
        """Return a copy with one message appended to the bounded history."""
        history = [
            *self.conversation_history,
            Message(role=role, content=content),
        ][-max_conversation_history:]
        return self.model_copy(update={"conversation_history": history})

    def bounded(
        self,
        *,
        max_recent_operations: int = DEFAULT_MAX_RECENT_OPERATIONS,
        max_conversation_history: int = DEFAULT_MAX_CONVERSATION_HISTORY,
    ) -> AIContext:
        """Return a copy with both logs truncated at the head to their bounds."""
        return self.model_copy(
            update={
                "recent_operations": self.recent_operations[-max_recent_operations:],
                "conversation_history": self.conversation_history[
                    -max_conversation_history:
                ],
            }
        )
