"""Implementation of the list command."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated

import typer
from rich.markup import escape

from patchkeeper.cli.common import conflicting_options, handle_errors, open_metadata, open_repository
from patchkeeper.utils.cli_utils import console

if TYPE_CHECKING:
	from patchkeeper.queue import BranchPatches

logger = logging.getLogger(__name__)

NamesArg = Annotated[
	list[str] | None,
	typer.Argument(help="Branches to list"),
]

AllFlag = Annotated[
	bool,
	typer.Option("--all", "-a", help="List all branches"),
]

HiddenFlag = Annotated[
	bool,
	typer.Option("--hidden", "-x", help="List hidden commits"),
]

STATE_COLORS = {
	"hidden": "cyan",
	"popped": "white",
	"pushed": "green",
}


def render_branch(branch: BranchPatches) -> None:
	"""Print a branch header followed by its patches, top first."""
	suffix = " (hidden)" if branch.hidden else ""
	console.print(f"[bold yellow]{escape(branch.name)}[/bold yellow]{suffix}", highlight=False)
	for patch in branch.patches:
		marker = "*" if patch.is_tip else " "
		color = STATE_COLORS[patch.state.value]
		console.print(
			f"[bold red]{marker}[/bold red] [bold {color}]{patch.short_id}[/bold {color}] {escape(patch.summary)}",
			highlight=False,
		)


def register_command(app: typer.Typer) -> None:
	"""Register the list command with the CLI app."""

	@app.command(name="list")
	def list_command(
		ctx: typer.Context,
		names: NamesArg = None,
		all_branches: AllFlag = False,
		hidden: HiddenFlag = False,
	) -> None:
		"""List the popped and pushed commits of the current branch."""
		from patchkeeper import queue

		conflicting_options([("-a", all_branches), ("<branch>", bool(names))])

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			for branch in queue.list_branch_patches(repo, meta, names, all_branches=all_branches, hidden=hidden):
				render_branch(branch)
