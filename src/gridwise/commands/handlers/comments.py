"""Handlers for cell comment threads."""

from __future__ import annotations

from gridwise.commands.types import AIResponse, ParsedCommand
from gridwise.session.models import Operation, OperationType
from gridwise.workbook.protocol import SpreadsheetCollaborator


class AddCommentCommand:
    """Deterministic `add_comment` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """Attach a new comment thread to one cell.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Success envelope carrying the new comment id.
        """
        cell = command.parameters["cell"]
        content = command.parameters["content"]
        comment_id = workbook.add_comment(cell, content)
        return AIResponse.ok(
            f"Added comment {comment_id} to {cell}",
            operations=[
                Operation(
                    type=OperationType.ADD_COMMENT,
                    target=cell,
                    value={"id": comment_id, "content": content},
                )
            ],
            code="comment_added",
        )


class ReplyCommentCommand:
    """Deterministic `reply_comment` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        comment_id = command.parameters["comment_id"]
        content = command.parameters["content"]
        workbook.reply_comment(comment_id, content)
        return AIResponse.ok(
            f"Replied to comment {comment_id}",
            operations=[
                Operation(
                    type=OperationType.REPLY_COMMENT, target=comment_id, value=content
                )
            ],
            code="comment_replied",
        )


class ResolveCommentCommand:
    """Deterministic `resolve_comment` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        comment_id = command.parameters["comment_id"]
        workbook.resolve_comment(comment_id)
        return AIResponse.ok(
            f"Resolved comment {comment_id}",
            operations=[Operation(type=OperationType.RESOLVE_COMMENT, target=comment_id)],
            code="comment_resolved",
        )


class DeleteCommentCommand:
    """Deterministic `delete_comment` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        comment_id = command.parameters["comment_id"]
        workbook.delete_comment(comment_id)
        return AIResponse.ok(
            f"Deleted comment {comment_id}",
            operations=[Operation(type=OperationType.DELETE_COMMENT, target=comment_id)],
            code="comment_deleted",
        )


class GetCommentsCommand:
    """Deterministic `get_comments` handler."""

    def execute(
        self, command: ParsedCommand, workbook: SpreadsheetCollaborator
    ) -> AIResponse:
        """List every comment thread on the worksheet.

        Args:
            command: Validated parsed command.
            workbook: Spreadsheet collaborator.

        Returns:
            Read-only success envelope.
        """
        comments = workbook.list_comments()
        if not comments:
            return AIResponse.ok("No comments on this worksheet.", code="comments_listed")
        lines = [f"Comments ({len(comments)}):"]
        for comment in comments:
            status = " [resolved]" if comment.resolved else ""
            replies = f" ({len(comment.replies)} replies)" if comment.replies else ""
            lines.append(f"- {comment.id} on {comment.cell}: {comment.content}{status}{replies}")
        return AIResponse.ok("\n".join(lines), code="comments_listed")
