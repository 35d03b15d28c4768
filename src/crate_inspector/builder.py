"""
Producing rustdoc JSON with cargo.

``CrateBuilder`` runs ``cargo metadata`` to locate the target directory and
the library target, then ``cargo rustdoc`` with the unstable JSON output
format, and loads the resulting document as a ``Crate``.

"""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from crate_inspector.errors import BuildError
from crate_inspector.krate import Crate

if TYPE_CHECKING:
	from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)


def run_cargo_command(command: list[str], cwd: Path | None = None) -> str:
	"""
	Run a cargo command and return its output.

	Args:
	    command: Cargo command to run
	    cwd: Working directory (optional)

	Returns:
	    Command output as string

	Raises:
	    BuildError: If cargo is missing or the command fails

	"""
	logger.debug("Running: %s", " ".join(command))
	try:
		# Arguments are passed as a list without a shell
		result = subprocess.run(  # noqa: S603
			command,
			cwd=cwd,
			capture_output=True,
			text=True,
			check=True,
		)
	except FileNotFoundError as e:
		error_msg = f"Could not run {command[0]}: is the Rust toolchain installed?"
		raise BuildError(error_msg) from e
	except subprocess.CalledProcessError as e:
		error_msg = f"Cargo command failed: {' '.join(command)}\nError: {e.stderr}"
		logger.debug(error_msg)
		raise BuildError(error_msg) from e
	else:
		return result.stdout


@dataclass(frozen=True)
class BuildOptions:
	"""Options for one ``cargo rustdoc`` run."""

	toolchain: str = "nightly"
	manifest_path: Path = Path("Cargo.toml")
	package: str | None = None
	features: tuple[str, ...] = field(default=())
	all_features: bool = False
	no_default_features: bool = False
	target: str | None = None
	target_dir: Path | None = None
	document_private_items: bool = False
	quiet: bool = True


@dataclass(frozen=True)
class CrateMetadata:
	"""What ``cargo metadata`` tells us about the crate being documented."""

	package: str
	lib_name: str
	target_dir: Path


class CrateBuilder:
	"""
	Fluent builder for rustdoc JSON.

	Every setter returns a new builder, so a configured builder can be shared
	and specialised:

	    base = CrateBuilder().manifest_path("foo/Cargo.toml")
	    krate = base.features(["serde"]).build()

	"""

	def __init__(self, options: BuildOptions | None = None) -> None:
		self.options = options or BuildOptions()

	@classmethod
	def from_config(cls, config: Mapping[str, Any]) -> CrateBuilder:
		"""
		Create a builder from the ``build`` configuration section.

		Args:
		    config: Mapping with the keys of ``BuildOptions``; missing keys keep their defaults

		Returns:
		    CrateBuilder: The configured builder

		"""
		defaults = BuildOptions()
		target_dir = config.get("target_dir")
		options = BuildOptions(
			toolchain=config.get("toolchain") or defaults.toolchain,
			manifest_path=Path(config.get("manifest_path") or defaults.manifest_path),
			package=config.get("package"),
			features=tuple(config.get("features") or ()),
			all_features=bool(config.get("all_features", False)),
			no_default_features=bool(config.get("no_default_features", False)),
			target=config.get("target"),
			target_dir=Path(target_dir) if target_dir else None,
			document_private_items=bool(config.get("document_private_items", False)),
			quiet=bool(config.get("quiet", True)),
		)
		return cls(options)

	def _with(self, **changes: Any) -> CrateBuilder:
		return CrateBuilder(replace(self.options, **changes))

	def toolchain(self, toolchain: str) -> CrateBuilder:
		return self._with(toolchain=toolchain)

	def manifest_path(self, path: str | Path) -> CrateBuilder:
		return self._with(manifest_path=Path(path))

	def package(self, package: str | None) -> CrateBuilder:
		return self._with(package=package)

	def features(self, features: Iterable[str]) -> CrateBuilder:
		return self._with(features=tuple(features))

	def all_features(self, enabled: bool = True) -> CrateBuilder:
		return self._with(all_features=enabled)

	def no_default_features(self, enabled: bool = True) -> CrateBuilder:
		return self._with(no_default_features=enabled)

	def target(self, target: str | None) -> CrateBuilder:
		return self._with(target=target)

	def target_dir(self, path: str | Path | None) -> CrateBuilder:
		return self._with(target_dir=Path(path) if path is not None else None)

	def document_private_items(self, enabled: bool = True) -> CrateBuilder:
		return self._with(document_private_items=enabled)

	def quiet(self, enabled: bool = True) -> CrateBuilder:
		return self._with(quiet=enabled)

	def metadata(self) -> CrateMetadata:
		"""
		Ask cargo for the target directory and the library target name.

		Raises:
		    BuildError: If cargo fails or the package has no library target

		"""
		opts = self.options
		output = run_cargo_command(
			["cargo", "metadata", "--format-version", "1", "--no-deps", "--manifest-path", str(opts.manifest_path)]
		)
		try:
			metadata = json.loads(output)
		except json.JSONDecodeError as e:
			msg = f"cargo metadata returned malformed JSON: {e}"
			raise BuildError(msg) from e

		package = self._select_package(metadata.get("packages", []))
		lib_name = None
		for target in package.get("targets", []):
			if "lib" in target.get("kind", []) or "proc-macro" in target.get("kind", []):
				lib_name = target["name"].replace("-", "_")
				break
		if lib_name is None:
			msg = f"Package {package.get('name')} has no library target"
			raise BuildError(msg)

		target_dir = opts.target_dir or Path(metadata.get("target_directory", "target"))
		return CrateMetadata(package=package["name"], lib_name=lib_name, target_dir=target_dir)

	def _select_package(self, packages: list[dict[str, Any]]) -> dict[str, Any]:
		opts = self.options
		if opts.package is not None:
			for package in packages:
				if package.get("name") == opts.package:
					return package
			msg = f"Package {opts.package} not found in {opts.manifest_path}"
			raise BuildError(msg)

		manifest = opts.manifest_path.resolve()
		for package in packages:
			if Path(package.get("manifest_path", "")).resolve() == manifest:
				return package
		if len(packages) == 1:
			return packages[0]
		msg = f"Cannot tell which package to document in {opts.manifest_path}; set a package"
		raise BuildError(msg)

	def rustdoc_command(self) -> list[str]:
		"""The ``cargo rustdoc`` invocation for the current options."""
		opts = self.options
		command = ["cargo", f"+{opts.toolchain}", "rustdoc", "--lib", "--manifest-path", str(opts.manifest_path)]
		if opts.package:
			command += ["--package", opts.package]
		if opts.features:
			command += ["--features", ",".join(opts.features)]
		if opts.all_features:
			command.append("--all-features")
		if opts.no_default_features:
			command.append("--no-default-features")
		if opts.target:
			command += ["--target", opts.target]
		if opts.target_dir:
			command += ["--target-dir", str(opts.target_dir)]
		if opts.quiet:
			command.append("--quiet")
		command += ["--", "-Z", "unstable-options", "--output-format", "json"]
		if opts.document_private_items:
			command.append("--document-private-items")
		return command

	def output_path(self, metadata: CrateMetadata) -> Path:
		"""Where rustdoc writes the JSON document."""
		doc_dir = metadata.target_dir
		if self.options.target:
			doc_dir = doc_dir / self.options.target
		return doc_dir / "doc" / f"{metadata.lib_name}.json"

	def build(self) -> Crate:
		"""
		Run rustdoc and load its JSON output.

		Returns:
		    Crate: The documented crate

		Raises:
		    BuildError: If cargo fails or produces no output file
		    CrateLoadError: If the output is not a valid rustdoc JSON document

		"""
		metadata = self.metadata()
		logger.info("Documenting %s with toolchain %s", metadata.package, self.options.toolchain)
		run_cargo_command(self.rustdoc_command())

		json_path = self.output_path(metadata)
		if not json_path.exists():
			msg = f"rustdoc did not produce {json_path}"
			raise BuildError(msg)
		return Crate.from_path(json_path)
