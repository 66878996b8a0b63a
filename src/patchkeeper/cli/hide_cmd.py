"""Implementation of the hide, unhide and delete commands."""

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

logger = logging.getLogger(__name__)

RevspecsArg = Annotated[
	list[str] | None,
	typer.Argument(help="Revisions to act on"),
]

AllFlag = Annotated[
	bool,
	typer.Option("--all", "-a", help="Apply to all commits"),
]

NextFlag = Annotated[
	bool,
	typer.Option("--next", "-n", help="Apply to the next popped commit"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the hide, unhide and delete commands with the CLI app."""

	@app.command(name="hide")
	def hide_command(
		ctx: typer.Context,
		revspecs: RevspecsArg = None,
		hide_all: AllFlag = False,
		hide_next: NextFlag = False,
	) -> None:
		"""Move popped commits to the hidden queue."""
		from patchkeeper import queue

		missing_or_conflicting_options([("-a", hide_all), ("-n", hide_next), ("<revspec>", bool(revspecs))])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)

			if revspecs:
				result = queue.hide_revspecs(repo, meta, revspecs)
			elif hide_all:
				result = queue.hide_all(repo, meta)
			else:
				result = queue.hide_next(repo, meta)

			print_result(result)

	@app.command(name="unhide")
	def unhide_command(
		ctx: typer.Context,
		revspecs: RevspecsArg = None,
		unhide_all: AllFlag = False,
	) -> None:
		"""Move hidden commits back to the popped queue."""
		from patchkeeper import queue

		missing_or_conflicting_options([("-a", unhide_all), ("<revspec>", bool(revspecs))])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)

			if unhide_all:
				result = queue.unhide_all(repo, meta)
			else:
				result = queue.unhide_revspecs(repo, meta, revspecs or [])

			print_result(result)

	@app.command(name="delete")
	def delete_command(
		ctx: typer.Context,
		revspecs: RevspecsArg = None,
		delete_next: NextFlag = False,
	) -> None:
		"""Stop tracking popped or hidden commits."""
		from patchkeeper import queue

		missing_or_conflicting_options([("-n", delete_next), ("<revspec>", bool(revspecs))])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)

			if revspecs:
				result = queue.delete_revspecs(repo, meta, revspecs)
			else:
				result = queue.delete_next(repo, meta)

			print_result(result)
