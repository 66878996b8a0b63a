"""Implementation of the init and new commands."""

from __future__ import annotations

import logging
from typing import Annotated

import typer

from patchkeeper.cli.common import handle_errors, open_metadata, open_repository, print_result, repo_path
from patchkeeper.config import ConfigLoader
from patchkeeper.utils.cli_utils import console

logger = logging.getLogger(__name__)

MessageArg = Annotated[
	list[str],
	typer.Argument(help="Commit message (words are joined with spaces)"),
]


def register_command(app: typer.Typer) -> None:
	"""Register the init and new commands with the CLI app."""

	@app.command(name="init")
	def init_command(ctx: typer.Context) -> None:
		"""Initialize a repository for patch tracking."""
		from patchkeeper.queue import init

		with handle_errors():
			path = repo_path(ctx)
			default_branch = ConfigLoader.get_instance().get.init.default_branch
			repo, meta = init(path, default_branch)
			console.print(f"initialized: [bold yellow]{repo.head_name()}[/bold yellow] (revision {meta.revision})")

	@app.command(name="new")
	def new_command(ctx: typer.Context, message: MessageArg) -> None:
		"""Commit tracked changes as a new patch on top of the branch."""
		from patchkeeper.queue import new

		with handle_errors():
			repo = open_repository(ctx)
			meta = open_metadata(repo)
			print_result(new(repo, meta, " ".join(message)))
