"""Implementation of the dialects command: show the available output dialects."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from .common import ConfigOpt

logger = logging.getLogger(__name__)


def register_command(app: typer.Typer) -> None:
	"""Register the dialects command with the CLI app."""

	@app.command(name="dialects")
	def dialects_command(config: ConfigOpt = None) -> None:
		"""List built-in and configured output dialects with their settings."""
		_dialects_command_impl(config=config)


# --- Implementation Function (Heavy imports deferred here) ---


def _dialects_command_impl(config: Path | None) -> None:
	"""Implementation of the dialects command with heavy imports deferred."""
	from rich.table import Table

	from crate_inspector.render import load_dialects
	from crate_inspector.utils.cli_utils import console, exit_with_error
	from crate_inspector.utils.config_loader import ConfigError

	from .common import load_config

	config_loader = load_config(config)
	render_config = config_loader.get_render_config()
	default_name = render_config.get("dialect", "native")
	try:
		dialects = load_dialects(render_config.get("dialects"))
	except ConfigError as e:
		exit_with_error(str(e), exception=e)

	table = Table(title="Dialects")
	table.add_column("Name", style="green")
	table.add_column("Generics")
	table.add_column("Conjunction")
	table.add_column("Lifetimes")
	table.add_column("References")
	table.add_column("Keywords")
	table.add_column("Qualified paths")
	table.add_column("No output")

	for name in sorted(dialects):
		dialect = dialects[name]
		open_token, close_token = dialect.generic_enclosure
		table.add_row(
			f"{name} (default)" if name == default_name else name,
			f"{open_token}T{close_token}",
			repr(dialect.conjunction),
			"yes" if dialect.include_lifetimes else "no",
			dialect.ref_style.value,
			"yes" if dialect.impl_trait_prefix else "no",
			dialect.qualified_path_style.value,
			dialect.no_output_marker or "-",
		)

	console.print(table)
