"""Command-line interface package for crate-inspector."""

from __future__ import annotations

import datetime
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from crate_inspector import __version__
from crate_inspector.utils.log_setup import setup_logging

from .dialects_cmd import register_command as register_dialects_command
from .items_cmd import register_command as register_items_command
from .signatures_cmd import register_command as register_signatures_command

logger = logging.getLogger(__name__)

# Load environment variables from .env.local first, then fall back to .env
env_local = Path(".env.local")
if env_local.exists():
	load_dotenv(dotenv_path=env_local)
	logger.debug("Loaded environment variables from %s", env_local)
else:
	env_file = Path(".env")
	if env_file.exists():
		load_dotenv(dotenv_path=env_file)
		logger.debug("Loaded environment variables from %s", env_file)

# Initialize the main CLI app
app = typer.Typer(
	help=f"crate-inspector - browse Rust crates through rustdoc JSON\n\nVersion: {__version__}",
	no_args_is_help=True,
	context_settings={"help_option_names": ["-h", "--help"]},
)

# --- Global Options Callback ---


def _version_callback(value: bool) -> None:
	"""Callback for --version option."""
	if value:
		typer.echo(f"crate-inspector version: {__version__}")
		raise typer.Exit


@app.callback(invoke_without_command=True)
def global_options(
	ctx: typer.Context,
	is_verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")] = False,
	is_output_log: Annotated[
		bool,
		typer.Option(
			"--save-log",
			help="Enable logging to a file. Logs to logs/crate_inspector_{datetime}.log.",
		),
	] = False,
	_version: Annotated[
		bool | None,
		typer.Option("--version", help="Show version and exit.", callback=_version_callback, is_eager=True),
	] = None,
) -> None:
	"""Global CLI options and logging setup."""
	ctx.meta["is_verbose"] = is_verbose
	ctx.meta["is_output_log"] = is_output_log

	log_file_path_to_use: Path | None = None
	if is_output_log:
		log_dir = Path("logs")
		log_dir.mkdir(parents=True, exist_ok=True)
		current_time = datetime.datetime.now(tz=datetime.UTC).strftime("%Y-%m-%d_%H-%M-%S")
		log_file_path_to_use = log_dir / f"crate_inspector_{current_time}.log"

	setup_logging(is_verbose=is_verbose, log_file_path=log_file_path_to_use)


# --- Register commands ---

register_items_command(app)
register_signatures_command(app)
register_dialects_command(app)


# --- Main Entry Point ---
def main() -> int:
	"""Run the CLI application."""
	return app()


if __name__ == "__main__":
	sys.exit(main())
