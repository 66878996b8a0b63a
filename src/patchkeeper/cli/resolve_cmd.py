"""Implementation of the resolve command."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from patchkeeper.cli.common import (
	handle_errors,
	missing_or_conflicting_options,
	open_metadata,
	open_repository,
	print_result,
)
from patchkeeper.utils.cli_utils import console

logger = logging.getLogger(__name__)

PathsArg = Annotated[
	list[str] | None,
	typer.Argument(help="Conflicted paths to mark as resolved"),
]

AllFlag = Annotated[
	bool,
	typer.Option("--all", "-a", help="Mark all merge conflicts as resolved"),
]

ListFlag = Annotated[
	bool,
	typer.Option("--list", "-l", help="List unresolved merge conflicts"),
]

UndoFlag = Annotated[
	bool,
	typer.Option("--undo", "-u", help="Undo the push or fold causing the current merge conflict"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the resolve command with the CLI app."""

	@app.command(name="resolve")
	def resolve_command(
		ctx: typer.Context,
		paths: PathsArg = None,
		resolve_all: AllFlag = False,
		list_only: ListFlag = False,
		undo: UndoFlag = False,
	) -> None:
		"""Resolve merge conflicts, or undo the operation that caused them."""
		from patchkeeper import queue

		missing_or_conflicting_options([("-a", resolve_all), ("-l", list_only), ("-u", undo), ("<path>", bool(paths))])

		with handle_errors():
			repo = open_repository(ctx)

			if list_only:
				conflicts = queue.list_conflicts(repo)
				if not conflicts:
					console.print("no merge conflicts")
				for path in conflicts:
					console.print(path, markup=False, highlight=False)
				return

			if undo:
				print_result(queue.resolve_undo(repo, open_metadata(repo)))
				return

			resolved = queue.resolve_all(repo) if resolve_all else queue.resolve_paths(repo, paths or [])
			for path in resolved:
				console.print(f"resolved: [bold green]{path}[/bold green]", highlight=False)
