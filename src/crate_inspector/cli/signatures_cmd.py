"""Implementation of the signatures command: render declared types in a dialect."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

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

if TYPE_CHECKING:
	from collections.abc import Callable, Iterator

	from crate_inspector.errors import CrateInspectorError
	from crate_inspector.krate import Crate, FunctionItem
	from crate_inspector.render import Dialect

logger = logging.getLogger(__name__)

DialectOpt = Annotated[
	str | None,
	typer.Option("--dialect", "-d", help="Output dialect (defaults to render.dialect from config)"),
]

NameOpt = Annotated[str | None, typer.Option("--name", "-n", help="Only render items with this name")]


@dataclass(frozen=True)
class Entry:
	"""One line of output: ``<kind> <prefix><rendering>``, both parts rendered in the chosen dialect."""

	kind: str
	name: str | None
	label: str
	prefix: Callable[[Dialect, int], str]
	render: Callable[[Dialect, int], str]


def _fixed(text: str) -> Callable[[Dialect, int], str]:
	return lambda _dialect, _depth: text


def _failed(error: CrateInspectorError) -> Callable[[Dialect, int], str]:
	def render(_dialect: Dialect, _depth: int) -> str:
		raise error

	return render


def _owner_prefix(function: FunctionItem, dialect: Dialect, max_depth: int) -> str:
	"""Return ``Type::`` for an associated function, spelled in the dialect, or ``""``."""
	from crate_inspector.render import render

	impl = function.associated_impl()
	if impl is None:
		return ""
	return dialect.path_name(f"{render(impl.for_type, dialect, max_depth=max_depth)}::")


def register_command(app: typer.Typer) -> None:
	"""Register the signatures command with the CLI app."""

	@app.command(name="signatures")
	def signatures_command(
		dialect: DialectOpt = None,
		name: NameOpt = None,
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
		"""Render function signatures and constant, static and field types."""
		_signatures_command_impl(
			dialect_name=dialect,
			name=name,
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


def collect_entries(krate: Crate) -> Iterator[Entry]:
	"""
	Yield everything in the crate that has a renderable declared type.

	Nothing is rendered here; a struct whose fields cannot be resolved yields a
	single entry that fails when rendered.

	"""
	from crate_inspector.errors import CrateInspectorError

	for function in krate.all_functions():
		if not function.is_crate_item() or function.name is None:
			continue
		yield Entry(
			"fn",
			function.name,
			function.name,
			lambda d, depth, f=function: _owner_prefix(f, d, depth),
			lambda d, depth, f=function: f.render_declaration(d, max_depth=depth),
		)

	for constant in krate.all_constants():
		if constant.is_crate_item() and constant.name is not None:
			yield Entry(
				"const",
				constant.name,
				constant.name,
				_fixed(f"{constant.name}: "),
				lambda d, depth, c=constant: c.render_type(d, max_depth=depth),
			)

	for static in krate.all_statics():
		if static.is_crate_item() and static.name is not None:
			yield Entry(
				"static",
				static.name,
				static.name,
				_fixed(f"{static.name}: "),
				lambda d, depth, s=static: s.render_type(d, max_depth=depth),
			)

	for struct in krate.all_structs():
		if not struct.is_crate_item() or struct.name is None:
			continue
		try:
			fields = list(struct.fields())
		except CrateInspectorError as e:
			yield Entry("field", None, f"{struct.name}.*", _fixed(f"{struct.name}.*: "), _failed(e))
			continue
		for field in fields:
			label = f"{struct.name}.{field.name or '_'}"
			yield Entry(
				"field",
				field.name,
				label,
				_fixed(f"{label}: "),
				lambda d, depth, f=field: f.render_type(d, max_depth=depth),
			)


# --- Implementation Function (Heavy imports deferred here) ---


def _signatures_command_impl(
	dialect_name: str | None,
	name: str | None,
	json_path: Path | None,
	config: Path | None,
	overrides: dict,
) -> None:
	"""Implementation of the signatures command with heavy imports deferred."""
	from rich.text import Text

	from crate_inspector.errors import CrateInspectorError, UnknownDialectError
	from crate_inspector.render import get_dialect
	from crate_inspector.utils.cli_utils import console, exit_with_error, show_warning
	from crate_inspector.utils.config_loader import ConfigError

	from .common import load_config, load_crate

	config_loader = load_config(config)
	render_config = config_loader.get_render_config()
	try:
		dialect = get_dialect(dialect_name or render_config.get("dialect", "native"), render_config.get("dialects"))
	except (UnknownDialectError, ConfigError) as e:
		exit_with_error(str(e), exception=e)
	max_depth = render_config.get("max_depth", 128)

	krate = load_crate(json_path, config_loader.get_build_config(), overrides)

	failures: list[str] = []
	try:
		entries = list(collect_entries(krate))
	except CrateInspectorError as e:
		exit_with_error("Failed to read the item graph", exception=e)

	for entry in entries:
		if name is not None and entry.name != name:
			continue
		try:
			prefix = entry.prefix(dialect, max_depth)
			rendered = entry.render(dialect, max_depth)
		except CrateInspectorError as e:
			logger.debug("Could not render %s", entry.label, exc_info=e)
			failures.append(f"{entry.kind} {entry.label}: {e}")
			continue
		console.print(Text.assemble((entry.kind, "cyan"), " ", (prefix, "green"), rendered), soft_wrap=True)

	if failures:
		show_warning(f"{len(failures)} item(s) could not be rendered:\n" + "\n".join(failures))
