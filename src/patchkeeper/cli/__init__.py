"""The ``pk`` command line: a typer app with one module per command family."""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from patchkeeper import __version__
from patchkeeper.config import ConfigError, ConfigLoader
from patchkeeper.utils.cli_utils import exit_with_error
from patchkeeper.utils.log_setup import setup_logging

from .branch_cmd import register_command as register_branch_command
from .hide_cmd import register_command as register_hide_command
from .init_cmd import register_command as register_init_command
from .list_cmd import register_command as register_list_command
from .push_cmd import register_command as register_push_command
from .refresh_cmd import register_command as register_refresh_command
from .resolve_cmd import register_command as register_resolve_command

logger = logging.getLogger(__name__)

LOG_DIR = Path("logs")

app = typer.Typer(
	help=f"Patch queues on top of git branches.\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)


def _print_version(value: bool) -> None:
	if value:
		typer.echo(f"patchkeeper version: {__version__}")
		raise typer.Exit


def _session_log_file() -> Path:
	stamp = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
	return LOG_DIR / f"patchkeeper_{stamp}.log"


VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")]
SaveLogOpt = Annotated[bool, typer.Option("--save-log", help="Also write a debug log under ./logs.")]
RepoOpt = Annotated[
	Path | None,
	typer.Option("--repo", "-C", help="Run against this repository instead of the current directory."),
]
ConfigOpt = Annotated[Path | None, typer.Option("--config", "-c", help="Read settings from this file.")]
VersionOpt = Annotated[
	bool | None,
	typer.Option("--version", help="Print the version and exit.", callback=_print_version, is_eager=True),
]


@app.callback()
def global_options(
	ctx: typer.Context,
	is_verbose: VerboseOpt = False,
	save_log: SaveLogOpt = False,
	repo_path: RepoOpt = None,
	config_file: ConfigOpt = None,
	_version: VersionOpt = None,
) -> None:
	"""Options shared by every command."""
	ctx.meta["is_verbose"] = is_verbose
	ctx.meta["repo_path"] = repo_path

	setup_logging(is_verbose=is_verbose, log_file_path=_session_log_file() if save_log else None)

	try:
		ConfigLoader.get_instance(config_file, reload=config_file is not None)
	except ConfigError as e:
		exit_with_error(f"error: {e}", exception=e)


register_init_command(app)
register_push_command(app)
register_hide_command(app)
register_refresh_command(app)
register_resolve_command(app)
register_branch_command(app)
register_list_command(app)


def main() -> int:
	"""Run ``pk``."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
