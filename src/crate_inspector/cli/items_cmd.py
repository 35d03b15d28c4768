"""Implementation of the items command: list the items of a crate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from .common import (
	AllFeaturesFlag,
	ConfigOpt,
	FeaturesOpt,
	JsonOpt,
	ManifestOpt,
	NoDefaultFeaturesFlag,
	PackageOpt,
	PrivateFlag,
	TargetDirOpt,
	TargetOpt,
	ToolchainOpt,
	build_overrides,
)

logger = logging.getLogger(__name__)

KindOpt = Annotated[
	str | None,
	typer.Option("--kind", "-k", help="Only list items of this kind (e.g. function, struct, module)"),
]

AllFlag = Annotated[bool, typer.Option("--all", "-a", help="Include items of external crates")]


def register_command(app: typer.Typer) -> None:
	"""Register the items command with the CLI app."""

	@app.command(name="items")
	def items_command(
		kind: KindOpt = None,
		include_external: AllFlag = False,
		json_path: JsonOpt = None,
		config: ConfigOpt = None,
		manifest_path: ManifestOpt = None,
		toolchain: ToolchainOpt = None,
		package: PackageOpt = None,
		features: FeaturesOpt = None,
		all_features: AllFeaturesFlag = False,
		no_default_features: NoDefaultFeaturesFlag = False,
		target: TargetOpt = None,
		target_dir: TargetDirOpt = None,
		private: PrivateFlag = False,
	) -> None:
		"""List the items of a crate with their ids and kinds."""
		_items_command_impl(
			kind=kind,
			include_external=include_external,
			json_path=json_path,
			config=config,
			overrides=build_overrides(
				manifest_path=manifest_path,
				toolchain=toolchain,
				package=package,
				features=features,
				all_features=all_features,
				no_default_features=no_default_features,
				target=target,
				target_dir=target_dir,
				private=private,
			),
		)


# --- Implementation Function (Heavy imports deferred here) ---


def _items_command_impl(
	kind: str | None,
	include_external: bool,
	json_path: Path | None,
	config: Path | None,
	overrides: dict,
) -> None:
	"""Implementation of the items command with heavy imports deferred."""
	from rich.table import Table

	from crate_inspector.krate import ItemKind
	from crate_inspector.utils.cli_utils import console, exit_with_error

	from .common import load_config, load_crate

	wanted: ItemKind | None = None
	if kind is not None:
		wanted = ItemKind(kind)
		if wanted is ItemKind.OTHER and kind != ItemKind.OTHER.value:
			valid = ", ".join(k.value for k in ItemKind)
			exit_with_error(f"Unknown item kind: {kind}\nValid kinds: {valid}")

	config_loader = load_config(config)
	krate = load_crate(json_path, config_loader.get_build_config(), overrides)

	items = krate.all_items() if include_external else krate.items()
	table = Table(title=f"Items of {krate.name or krate.root}")
	table.add_column("Id", style="dim")
	table.add_column("Kind", style="cyan")
	table.add_column("Name", style="green")

	count = 0
	for item in items:
		if wanted is not None and item.kind is not wanted:
			continue
		table.add_row(item.id, item.tag, item.name or "<unnamed>")
		count += 1

	logger.debug("Listed %d items", count)
	console.print(table)
