"""Implementation of the refresh, finalize and reset commands."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from patchkeeper.cli.common import handle_errors, open_metadata, open_repository, print_result
from patchkeeper.config import ConfigLoader

logger = logging.getLogger(__name__)

ResolveFlag = Annotated[
	bool,
	typer.Option("--resolve", "-r", help="Mark all merge conflicts as resolved"),
]

AuthorFlag = Annotated[
	bool | None,
	typer.Option("--author/--keep-author", help="Take the author identity from the current user"),
]

CommitterFlag = Annotated[
	bool | None,
	typer.Option("--committer/--keep-committer", help="Take the committer identity from the current user"),
]

RevspecArg = Annotated[
	str,
	typer.Argument(help="Revision to reset the branch to"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the refresh, finalize and reset commands with the CLI app."""

	@app.command(name="refresh")
	def refresh_command(
		ctx: typer.Context,
		resolve: ResolveFlag = False,
		author: AuthorFlag = None,
		committer: CommitterFlag = None,
	) -> None:
		"""Amend the tip with the tracked changes in the working tree."""
		from patchkeeper import queue

		with handle_errors():
			defaults = ConfigLoader.get_instance().get.refresh
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			result = queue.refresh(
				repo,
				meta,
				author=defaults.update_author if author is None else author,
				committer=defaults.update_committer if committer is None else committer,
				allow_conflicts=resolve,
			)
			print_result(result)

	@app.command(name="finalize")
	def finalize_command(ctx: typer.Context) -> None:
		"""Stop tracking the pushed commits, keeping them in history."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()
			print_result(queue.finalize(repo, meta))

	@app.command(name="reset")
	def reset_command(ctx: typer.Context, revspec: RevspecArg) -> None:
		"""Move the branch tip to REVSPEC (only without pushed commits)."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()
			print_result(queue.reset(repo, meta, revspec))
