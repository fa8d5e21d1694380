"""CLI response rendering with Rich views."""

from __future__ import annotations

from rich.console import Console
from rich.json import JSON
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from gridwise.commands.types import AIResponse, CommandSuggestion


class CliRenderer:
    """Render command responses with Rich structures and code-based policies."""

    def __init__(self, *, console: Console) -> None:
        """Store console used for rendering.

        Args:
            console: Rich console used for output rendering.
        """
        self._console = console

    def render(self, response: AIResponse, *, as_json: bool = False) -> None:
        """Render one command response.

        Args:
            response: Structured command response.
            as_json: Print the serialized response instead of panels.
        """
        if as_json:
            self._console.print(JSON.from_data(response.model_dump(mode="json")))
            return
        if response.code == "confirmation_required":
            self._console.print(
                Panel(
                    Text(response.message),
                    title="Confirmation Required",
                    border_style="bold yellow",
                    expand=True,
                )
            )
            return
        if response.success:
            self._console.print(
                Panel(
                    Text(response.message),
                    title=escape(f"Gridwise [{response.code}]"),
                    border_style="green",
                    expand=True,
                )
            )
            if response.operations:
                self._console.print(self._operations_table(response))
            return
        body = response.message
        if response.error and response.error != response.message:
            body = f"{response.message}\n{response.error}"
        self._console.print(
            Panel(
                Text(body),
                title=escape(f"Error [{response.code}]"),
                border_style="bold red",
                expand=True,
            )
        )
        if response.operations:
            self._console.print(self._operations_table(response))

    def render_suggestions(self, suggestions: list[CommandSuggestion]) -> None:
        """Render the command catalogue as a table."""
        if not suggestions:
            self._console.print("No matching commands.", style="yellow")
            return
        table = Table(title="Commands")
        table.add_column("Command", style="bold cyan")
        table.add_column("Description")
        table.add_column("Example", style="green")
        for suggestion in suggestions:
            table.add_row(
                Text(suggestion.command),
                Text(suggestion.description),
                Text(suggestion.example),
            )
        self._console.print(table)

    @staticmethod
    def _operations_table(response: AIResponse) -> Table:
        table = Table(title="Operations")
        table.add_column("Type", style="bold")
        table.add_column("Target")
        table.add_column("Value")
        table.add_column("Previous")
        for operation in response.operations:
            table.add_row(
                operation.type.value,
                operation.target,
                Text("" if operation.value is None else str(operation.value)),
                Text("" if operation.old_value is None else str(operation.old_value)),
            )
        return table
