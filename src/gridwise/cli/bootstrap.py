"""CLI bootstrap helpers: logging, config and service construction."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from gridwise.config import ConfigError, GridwiseConfig, LogLevel, load_config
from gridwise.errors import WorkbookError
from gridwise.service import AIService
from gridwise.session.models import AIContext
from gridwise.workbook import InMemoryWorkbook

_LOGGING_CONFIGURED = False


def configure_logging(level: LogLevel = LogLevel.INFO) -> None:
    """Configure Rich-backed logging once for CLI commands.

    Args:
        level: Root logging level name.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if _LOGGING_CONFIGURED:
        return
    logging.basicConfig(
        level=level.value,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )
    _LOGGING_CONFIGURED = True


def load_cli_config(config_file: Path | None, *, console: Console) -> GridwiseConfig:
    """Load config for a CLI command, exiting with status 1 when invalid.

    Raises:
        Exit: If the config file cannot be decoded or validated.
    """
    try:
        return load_config(config_file)
    except ConfigError as exc:
        console.print(f"[bold red]Invalid config: {escape(str(exc))}[/bold red]")
        raise typer.Exit(code=1) from exc


def build_workbook(workbook_file: Path | None, *, console: Console) -> InMemoryWorkbook:
    """Load the workbook fixture, or start from an empty sheet.

    Raises:
        Exit: If the workbook file cannot be loaded.
    """
    if workbook_file is None:
        return InMemoryWorkbook()
    try:
        return InMemoryWorkbook.from_file(workbook_file)
    except (OSError, WorkbookError) as exc:
        console.print(
            f"[bold red]Failed to load workbook: {escape(str(exc))}[/bold red]"
        )
        raise typer.Exit(code=1) from exc


def build_service(
    *,
    config: GridwiseConfig,
    workbook: InMemoryWorkbook,
    selection: str | None = None,
) -> AIService:
    """Construct the command service for one CLI session.

    Args:
        config: Loaded runtime config.
        workbook: Spreadsheet collaborator.
        selection: Optional initial selection.

    Returns:
        Ready service bound to the workbook.
    """
    context = AIContext(
        current_workbook="cli",
        current_worksheet=workbook.name,
        current_selection=(selection or "").strip().upper(),
    )
    return AIService(workbook, config=config, context=context)
