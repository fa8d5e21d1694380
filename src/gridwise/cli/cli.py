"""Typer CLI entrypoint for Gridwise."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from gridwise.cli.bootstrap import (
    build_service,
    build_workbook,
    configure_logging,
    load_cli_config,
)
from gridwise.cli.rendering import CliRenderer
from gridwise.commands.parser import CommandParser
from gridwise.commands.types import AIResponse
from gridwise.service import AIService

app = typer.Typer(help="Gridwise natural-language spreadsheet commands")
_CONSOLE = Console()
_RENDERER = CliRenderer(console=_CONSOLE)

_WorkbookOption = Annotated[
    Path | None,
    typer.Option(
        "--workbook",
        file_okay=True,
        dir_okay=False,
        help="YAML/JSON workbook fixture ({cell: value} mapping).",
    ),
]
_ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        file_okay=True,
        dir_okay=False,
        help="Path to Gridwise config YAML/JSON file.",
    ),
]
_SelectionOption = Annotated[
    str | None,
    typer.Option("--selection", help="Current selection, e.g. A1:B10."),
]


def _submit(
    service: AIService,
    text: str,
    *,
    assume_yes: bool,
    as_json: bool = False,
) -> AIResponse:
    """Run one command, asking for confirmation when the gate holds it.

    Args:
        service: Command service.
        text: Raw command text.
        assume_yes: Confirm destructive commands without prompting.
        as_json: Render responses as JSON.

    Returns:
        Final response; a declined confirmation returns a failure envelope.
    """
    response = service.process_command(text)
    if response.code != "confirmation_required":
        _RENDERER.render(response, as_json=as_json)
        return response
    if not assume_yes:
        _RENDERER.render(response, as_json=as_json)
        if not typer.confirm("Proceed?", default=False):
            declined = AIResponse.failure(
                "Cancelled by user",
                message="Command was not confirmed",
                code="confirmation_declined",
            )
            _RENDERER.render(declined, as_json=as_json)
            return declined
    response = service.process_command(text, confirmed=True)
    _RENDERER.render(response, as_json=as_json)
    return response


@app.command("run")
def run_command(  # noqa: PLR0913
    text: Annotated[str, typer.Argument(help="Command to execute.")],
    workbook_file: _WorkbookOption = None,
    selection: _SelectionOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Confirm destructive commands."),
    ] = False,
    config_file: _ConfigOption = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the response as JSON."),
    ] = False,
) -> None:
    """Execute one command against a workbook and print the response.

    Args:
        text: Raw command text.
        workbook_file: Optional workbook fixture.
        selection: Optional current selection.
        yes: Confirm destructive commands without prompting.
        config_file: Optional config file path.
        as_json: Print the serialized response.

    Raises:
        Exit: Raised with status 0 on success, 1 on failure.
    """
    config = load_cli_config(config_file, console=_CONSOLE)
    configure_logging(config.logging.level)
    workbook = build_workbook(workbook_file, console=_CONSOLE)
    service = build_service(config=config, workbook=workbook, selection=selection)
    response = _submit(service, text, assume_yes=yes, as_json=as_json)
    raise typer.Exit(code=0 if response.success else 1)


@app.command("repl")
def repl_command(
    workbook_file: _WorkbookOption = None,
    selection: _SelectionOption = None,
    config_file: _ConfigOption = None,
) -> None:
    """Run an interactive command loop against one in-memory workbook.

    Args:
        workbook_file: Optional workbook fixture.
        selection: Optional initial selection.
        config_file: Optional config file path.
    """
    config = load_cli_config(config_file, console=_CONSOLE)
    configure_logging(config.logging.level)
    workbook = build_workbook(workbook_file, console=_CONSOLE)
    service = build_service(config=config, workbook=workbook, selection=selection)
    _CONSOLE.print(
        "Gridwise REPL. Type a command, ':select A1:B10', ':help', or 'exit'.",
        style="cyan",
    )
    while True:
        try:
            raw = typer.prompt("gridwise")
        except (EOFError, KeyboardInterrupt, typer.Abort):
            _CONSOLE.print("\nbye", style="yellow")
            break

        text = raw.strip()
        if text.lower() in {"exit", "quit", "exit()", "quit()"}:
            _CONSOLE.print("bye", style="yellow")
            break
        if not text:
            continue
        if text == ":help":
            _RENDERER.render_suggestions(service.get_suggestions())
            continue
        if text.startswith(":select"):
            ref = text.removeprefix(":select").strip().upper()
            service.update_context({"current_selection": ref})
            _CONSOLE.print(f"Selection: {ref or '(none)'}", style="cyan")
            continue
        _submit(service, text, assume_yes=False)


@app.command("suggest")
def suggest_command(
    partial: Annotated[
        str, typer.Argument(help="Filter commands by partial text.")
    ] = "",
) -> None:
    """List supported command templates, optionally filtered.

    Args:
        partial: Partial command text.
    """
    _RENDERER.render_suggestions(CommandParser().get_suggestions(partial))
