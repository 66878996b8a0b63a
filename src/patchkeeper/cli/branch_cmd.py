"""Implementation of the branch commands (bnew, bset, brename, bdelete, blist, bhide, bunhide)."""

from __future__ import annotations

import logging
from typing import Annotated

import typer
from rich.markup import escape

from patchkeeper.cli.common import (
	handle_errors,
	missing_option,
	open_metadata,
	open_repository,
	print_branch_action,
)
from patchkeeper.utils.cli_utils import console, exit_with_error

logger = logging.getLogger(__name__)

NameArg = Annotated[
	str,
	typer.Argument(help="Branch name"),
]

NamesArg = Annotated[
	list[str] | None,
	typer.Argument(help="Branch names"),
]

ForceFlag = Annotated[
	bool,
	typer.Option("--force", "-f", help="Delete even if the branch has patches or properties"),
]

RemoteFlag = Annotated[
	bool,
	typer.Option("--remote", "-r", help="Show remote branches"),
]

HiddenFlag = Annotated[
	bool,
	typer.Option("--hidden", "-x", help="Show hidden branches"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the branch commands with the CLI app."""

	@app.command(name="bnew")
	def bnew_command(ctx: typer.Context, name: NameArg) -> None:
		"""Create a branch at HEAD and switch to it."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()
			queue.branch_new(repo, name)
			print_branch_action("new", name)

	@app.command(name="bset")
	def bset_command(ctx: typer.Context, name: NameArg) -> None:
		"""Switch to a branch."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()
			queue.branch_set(repo, name)
			print_branch_action("branch", name)

	@app.command(name="brename")
	def brename_command(ctx: typer.Context, names: NamesArg = None) -> None:
		"""Rename the current branch (NEW) or another one (OLD NEW)."""
		from patchkeeper import queue

		names = names or []
		missing_option([("<name>", bool(names))])
		if len(names) > 2:  # noqa: PLR2004
			exit_with_error("too many arguments", exit_code=2)

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			repo.ensure_no_unresolved()
			repo.ensure_no_unrefreshed()

			old_name, new_name = (repo.head_name(), names[0]) if len(names) == 1 else names
			queue.branch_rename(repo, meta, old_name, new_name)
			print_branch_action("rename", f"{old_name} -> {new_name}")

	@app.command(name="bdelete")
	def bdelete_command(ctx: typer.Context, name: NameArg, force: ForceFlag = False) -> None:
		"""Delete a branch and its metadata."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			queue.branch_delete(repo, meta, name, force=force)
			print_branch_action("delete", name)

	@app.command(name="bhide")
	def bhide_command(ctx: typer.Context, names: NamesArg = None) -> None:
		"""Hide branches (the current one by default) from listings."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			for name in queue.branch_hide(repo, meta, names or [repo.head_name()]):
				print_branch_action("hide", name)

	@app.command(name="bunhide")
	def bunhide_command(ctx: typer.Context, names: NamesArg = None) -> None:
		"""Show hidden branches in listings again."""
		from patchkeeper import queue

		missing_option([("<branch>", bool(names))])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			for name in queue.branch_unhide(repo, meta, names or []):
				print_branch_action("unhide", name)

	@app.command(name="blist")
	def blist_command(ctx: typer.Context, remote: RemoteFlag = False, hidden: HiddenFlag = False) -> None:
		"""List branches, marking the current one."""
		from patchkeeper import queue

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			for entry in queue.branch_list(repo, meta, remote=remote, hidden=hidden):
				marker = "*" if entry.is_head else " "
				console.print(f"[bold red]{marker}[/bold red] [bold yellow]{escape(entry.name)}[/bold yellow]")
