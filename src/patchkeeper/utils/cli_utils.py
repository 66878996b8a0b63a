"""Error reporting helpers for the ``pk`` commands."""

from __future__ import annotations

import logging
from typing import NoReturn

import typer
from rich.console import Console

from patchkeeper.utils.log_setup import display_error_summary, display_warning_summary

console = Console()
logger = logging.getLogger(__name__)


def show_error(message: str, exception: Exception | None = None) -> None:
	"""Print an error banner; the causing exception only goes to the debug log."""
	if exception is not None:
		logger.debug("Command failed", exc_info=exception)
	display_error_summary(message)


def show_warning(message: str) -> None:
	"""Print a warning banner."""
	display_warning_summary(message)


def exit_with_error(message: str, exit_code: int = 1, exception: Exception | None = None) -> NoReturn:
	"""
	Report an error and end the command.

	Args:
		message: Text of the error banner
		exit_code: Process exit status
		exception: Cause, chained onto the ``typer.Exit``

	Raises:
		typer.Exit: Always
	"""
	show_error(message, exception)
	raise typer.Exit(exit_code) from exception


def handle_keyboard_interrupt() -> NoReturn:
	"""End the command after Ctrl+C with the conventional status 130."""
	console.print("\n[yellow]Interrupted.[/yellow]")
	raise typer.Exit(130)
