"""Implementation of the push, pop and fold commands."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from patchkeeper.cli.common import (
	conflicting_options,
	handle_errors,
	open_metadata,
	open_repository,
	print_result,
)

logger = logging.getLogger(__name__)

RevspecArg = Annotated[
	str | None,
	typer.Argument(help="Revision to push or pop up to"),
]

RevspecsArg = Annotated[
	list[str] | None,
	typer.Argument(help="Revisions to fold"),
]

AllFlag = Annotated[
	bool,
	typer.Option("--all", "-a", help="Apply to all commits"),
]

NextFlag = Annotated[
	bool,
	typer.Option("--next", "-n", help="Fold the next popped commit"),
]

MoveOpt = Annotated[
	str | None,
	typer.Option("--move", "-m", metavar="REVSPEC", help="Push a popped or hidden commit out of order"),
]

GraftOpt = Annotated[
	str | None,
	typer.Option("--graft", "-g", metavar="REVSPEC", help="Copy any commit onto the branch"),
]

BackoutOpt = Annotated[
	str | None,
	typer.Option("--backout", "-b", metavar="REVSPEC", help="Push a commit that reverts REVSPEC"),
]

FinalizedFlag = Annotated[
	bool,
	typer.Option("--finalized", "-f", help="Pop the finalized tip commit"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the push, pop and fold commands with the CLI app."""

	@app.command(name="push")
	def push_command(
		ctx: typer.Context,
		revspec: RevspecArg = None,
		push_all: AllFlag = False,
		move: MoveOpt = None,
		graft: GraftOpt = None,
		backout: BackoutOpt = None,
	) -> None:
		"""Push popped commits back onto the branch (the next one by default)."""
		from patchkeeper import queue

		conflicting_options(
			[
				("-a", push_all),
				("-m", move is not None),
				("-g", graft is not None),
				("-b", backout is not None),
				("<revspec>", revspec is not None),
			]
		)

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()

			if revspec is not None:
				result = queue.push_revspec(repo, meta, revspec)
			elif push_all:
				result = queue.push_all(repo, meta)
			elif move is not None:
				result = queue.push_move(repo, meta, move)
			elif graft is not None:
				result = queue.push_graft(repo, meta, graft)
			elif backout is not None:
				result = queue.push_backout(repo, meta, backout)
			else:
				result = queue.push_next(repo, meta)

			print_result(result)

	@app.command(name="pop")
	def pop_command(
		ctx: typer.Context,
		revspec: RevspecArg = None,
		pop_all: AllFlag = False,
		finalized: FinalizedFlag = False,
	) -> None:
		"""Pop commits off the branch (the tip by default)."""
		from patchkeeper import queue

		conflicting_options([("-a", pop_all), ("-f", finalized), ("<revspec>", revspec is not None)])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()

			if revspec is not None:
				result = queue.pop_revspec(repo, meta, revspec)
			elif pop_all:
				result = queue.pop_all(repo, meta)
			elif finalized:
				result = queue.pop_finalized(repo, meta)
			else:
				result = queue.pop_next(repo, meta)

			print_result(result)

	@app.command(name="fold")
	def fold_command(
		ctx: typer.Context,
		revspecs: RevspecsArg = None,
		fold_next: NextFlag = False,
	) -> None:
		"""Squash popped commits into the tip (the next one by default)."""
		from patchkeeper import queue

		conflicting_options([("-n", fold_next), ("<revspec>", bool(revspecs))])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()

			if revspecs:
				result = queue.fold_revspecs(repo, meta, revspecs)
			else:
				result = queue.fold_next(repo, meta)

			print_result(result)
