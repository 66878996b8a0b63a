"""
Logging and summary banners for the ``pk`` command line.

Log records go to stderr through rich; ``--save-log`` also writes every
record, down to DEBUG, to a plain text file.

"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.rule import Rule
from rich.text import Text

console = Console(stderr=True)

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def _console_handler(is_verbose: bool) -> logging.Handler:
	handler = RichHandler(
		console=console,
		rich_tracebacks=True,
		show_time=is_verbose,
		show_path=is_verbose,
	)
	handler.setLevel(logging.DEBUG if is_verbose else logging.WARNING)
	return handler


def _file_handler(path: Path) -> logging.Handler:
	path.parent.mkdir(parents=True, exist_ok=True)
	handler = logging.FileHandler(path, mode="a", encoding="utf-8")
	handler.setLevel(logging.DEBUG)
	handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
	return handler


def setup_logging(
	is_verbose: bool = False,
	log_to_console: bool = True,
	log_file_path: Path | str | None = None,
) -> None:
	"""
	Replace the root logger's handlers with the ``pk`` ones.

	Args:
		is_verbose: Show DEBUG records on the console instead of only warnings
		log_to_console: Install the rich console handler
		log_file_path: Also append every record to this file
	"""
	root_logger = logging.getLogger()
	for handler in root_logger.handlers[:]:
		root_logger.removeHandler(handler)

	console_level = logging.DEBUG if is_verbose else logging.WARNING
	root_logger.setLevel(logging.DEBUG if log_file_path else console_level)

	if log_to_console:
		root_logger.addHandler(_console_handler(is_verbose))

	if log_file_path:
		try:
			root_logger.addHandler(_file_handler(Path(log_file_path)))
		except OSError as e:
			root_logger.warning("Cannot write log file %s: %s", log_file_path, e)
		else:
			root_logger.debug("Logging to file: %s", log_file_path)


def _summary(title: str, style: str, message: str) -> None:
	console.print()
	console.print(Rule(Text(title, style=f"bold {style}"), style=style))
	console.print(f"\n{message}\n", markup=False, soft_wrap=True)
	console.print(Rule(style=style))
	console.print()


def display_error_summary(error_message: str) -> None:
	"""Print ``error_message`` between red rules."""
	_summary("Error Summary", "red", error_message)


def display_warning_summary(warning_message: str) -> None:
	"""Print ``warning_message`` between yellow rules."""
	_summary("Warning Summary", "yellow", warning_message)
