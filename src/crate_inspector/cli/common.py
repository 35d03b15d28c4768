"""Options and helpers shared by the commands that load a crate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

import typer

if TYPE_CHECKING:
	from crate_inspector.krate import Crate
	from crate_inspector.utils.config_loader import ConfigLoader

logger = logging.getLogger(__name__)

# --- Command Argument Annotations ---

JsonOpt = Annotated[
	Path | None,
	typer.Option(
		"--json",
		exists=True,
		dir_okay=False,
		help="Read an existing rustdoc JSON file instead of running cargo",
	),
]

ConfigOpt = Annotated[
	Path | None,
	typer.Option(
		"--config",
		"-c",
		help="Path to config file",
	),
]

ManifestOpt = Annotated[Path | None, typer.Option("--manifest-path", help="Path to Cargo.toml")]

ToolchainOpt = Annotated[str | None, typer.Option("--toolchain", help="Rust toolchain to run rustdoc with")]

PackageOpt = Annotated[str | None, typer.Option("--package", "-p", help="Package to document")]

FeaturesOpt = Annotated[
	str | None,
	typer.Option("--features", "-F", help="Comma-separated list of features to enable"),
]

AllFeaturesFlag = Annotated[bool, typer.Option("--all-features", help="Enable all features")]

NoDefaultFeaturesFlag = Annotated[bool, typer.Option("--no-default-features", help="Disable default features")]

TargetOpt = Annotated[str | None, typer.Option("--target", help="Target triple to document for")]

TargetDirOpt = Annotated[Path | None, typer.Option("--target-dir", help="Cargo target directory")]

PrivateFlag = Annotated[bool, typer.Option("--private", help="Include private items")]


def build_overrides(
	manifest_path: Path | None = None,
	toolchain: str | None = None,
	package: str | None = None,
	features: str | None = None,
	all_features: bool = False,
	no_default_features: bool = False,
	target: str | None = None,
	target_dir: Path | None = None,
	private: bool = False,
) -> dict[str, Any]:
	"""
	Collect the build options given on the command line.

	Only options that were actually set are returned, so they can be laid
	over the ``build`` config section.

	"""
	overrides: dict[str, Any] = {}
	if manifest_path is not None:
		overrides["manifest_path"] = str(manifest_path)
	if toolchain:
		overrides["toolchain"] = toolchain
	if package:
		overrides["package"] = package
	if features is not None:
		overrides["features"] = [f.strip() for f in features.split(",") if f.strip()]
	if all_features:
		overrides["all_features"] = True
	if no_default_features:
		overrides["no_default_features"] = True
	if target:
		overrides["target"] = target
	if target_dir is not None:
		overrides["target_dir"] = str(target_dir)
	if private:
		overrides["document_private_items"] = True
	return overrides


def load_config(config_path: Path | None) -> ConfigLoader:
	"""Create the config loader, turning config errors into a CLI error."""
	from crate_inspector.utils.cli_utils import exit_with_error
	from crate_inspector.utils.config_loader import ConfigError, ConfigLoader

	try:
		return ConfigLoader(config_file=config_path)
	except ConfigError as e:
		exit_with_error(f"Invalid configuration: {e}", exception=e)


def load_crate(json_path: Path | None, build_config: dict[str, Any], overrides: dict[str, Any]) -> Crate:
	"""
	Load the crate to inspect.

	Args:
	    json_path: Existing rustdoc JSON file; when given, cargo is not run
	    build_config: The ``build`` config section
	    overrides: Build options from the command line

	Returns:
	    Crate: The loaded crate

	"""
	from crate_inspector.builder import CrateBuilder
	from crate_inspector.errors import BuildError, CrateLoadError
	from crate_inspector.krate import Crate
	from crate_inspector.utils.cli_utils import exit_with_error, loading_spinner

	try:
		if json_path is not None:
			return Crate.from_path(json_path)
		builder = CrateBuilder.from_config({**build_config, **overrides})
		with loading_spinner("Running cargo rustdoc..."):
			return builder.build()
	except BuildError as e:
		exit_with_error("Failed to build rustdoc JSON", exception=e)
	except CrateLoadError as e:
		exit_with_error("Failed to load rustdoc JSON", exception=e)
