"""Helpers shared by the patchkeeper commands."""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pygit2
import typer
from rich.markup import escape

from patchkeeper.config import ConfigError
from patchkeeper.git.utils import GitError, PatchRepoContext
from patchkeeper.meta import Metadata, PatchkeeperError
from patchkeeper.utils.cli_utils import console, exit_with_error, handle_keyboard_interrupt, show_warning

if TYPE_CHECKING:
	from collections.abc import Iterator

	from patchkeeper.queue import OperationResult

logger = logging.getLogger(__name__)

# Usage errors exit like click's own usage errors
USAGE_EXIT_CODE = 2


def _enabled(options: list[tuple[str, bool]]) -> list[str]:
	return [name for name, enabled in options if enabled]


def missing_option(options: list[tuple[str, bool]]) -> None:
	"""Exit with a usage error unless at least one of ``options`` is given."""
	if not _enabled(options):
		names = " or ".join(name for name, _ in options)
		exit_with_error(f"missing option: {names}", exit_code=USAGE_EXIT_CODE)


def conflicting_options(options: list[tuple[str, bool]]) -> None:
	"""Exit with a usage error if more than one of ``options`` is given."""
	enabled = _enabled(options)
	if len(enabled) > 1:
		names = " and ".join(enabled)
		exit_with_error(f"conflicting options: {names}", exit_code=USAGE_EXIT_CODE)


def missing_or_conflicting_options(options: list[tuple[str, bool]]) -> None:
	"""Exit with a usage error unless exactly one of ``options`` is given."""
	missing_option(options)
	conflicting_options(options)


def repo_path(ctx: typer.Context) -> Path:
	"""Return the repository path given with ``--repo``, or the current directory."""
	return ctx.meta.get("repo_path") or Path.cwd()


def open_repository(ctx: typer.Context) -> PatchRepoContext:
	"""Discover the repository the command runs against."""
	return PatchRepoContext.discover(repo_path(ctx))


def open_metadata(repo: PatchRepoContext) -> Metadata:
	"""Load the metadata snapshot and surface verification warnings."""
	meta = Metadata.open(repo)
	for warning in meta.warnings:
		show_warning(warning)
	return meta


@contextlib.contextmanager
def handle_errors() -> Iterator[None]:
	"""Turn engine, git and configuration errors into a clean exit."""
	try:
		yield
	except (PatchkeeperError, GitError, ConfigError) as e:
		exit_with_error(f"error: {e}", exception=e)
	except (pygit2.GitError, KeyError) as e:
		message = str(e).strip("'").rstrip(".")
		exit_with_error(f"error: {message}", exception=e)
	except KeyboardInterrupt:
		handle_keyboard_interrupt()


def print_commit_action(action: str, short_id: str, summary: str) -> None:
	"""Print one ``action: id summary`` line."""
	console.print(f"{action}: [bold green]{short_id}[/bold green] {escape(summary)}", highlight=False)


def print_branch_action(action: str, name: str) -> None:
	"""Print one ``action: branch`` line."""
	console.print(f"{action}: [bold yellow]{escape(name)}[/bold yellow]", highlight=False)


def print_conflicts(paths: list[str]) -> None:
	"""Print the conflicting paths of a paused operation."""
	console.print("[bold red]merge conflict(s):[/bold red]")
	for path in paths:
		console.print(path, markup=False, highlight=False)


def print_result(result: OperationResult) -> None:
	"""Print every step of an operation, then any conflicts it stopped on."""
	for action in result.actions:
		print_commit_action(action.action, action.short_id, action.summary)
	if result.paused:
		print_conflicts(result.conflicts)
