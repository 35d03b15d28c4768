"""
Output dialects for the type-expression renderer.

A dialect is an immutable bundle of the tokens and substitutions the renderer
uses: how generic argument lists are enclosed, how bounds are joined, whether
lifetimes and keyword prefixes appear, how references and qualified paths are
spelled, and how primitive names are displayed.

Two dialects ship built in:

- ``native``: Rust source syntax (``Vec<u8>``, ``dyn Send + Sync``, ``&mut 'a T``)
- ``alternate``: a Python-flavoured rendering (``Vec(Nat)``, ``Send and Sync``,
  ``RefMut(T)``, ``(x: Int) -> NoneType``)

Further dialects can be declared in the ``render.dialects`` configuration
section, optionally starting from a built-in one via a ``base`` key.

"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from crate_inspector.errors import UnknownDialectError
from crate_inspector.utils.config_loader import ConfigError

logger = logging.getLogger(__name__)


class RefStyle(str, Enum):
	"""How borrowed references are spelled."""

	PREFIX = "prefix"  # &T, &mut T
	WRAPPER = "wrapper"  # Ref(T), RefMut(T)


class QualifiedPathStyle(str, Enum):
	"""How associated-item projections are spelled."""

	BRACKETED = "bracketed"  # <T as Trait>::Name<A>
	DOTTED = "dotted"  # T|<: Trait|.Name(A)


class Dialect(BaseModel):
	"""Immutable rendering configuration."""

	model_config = ConfigDict(frozen=True, extra="forbid")

	name: str
	generic_enclosure: tuple[str, str] = ("<", ">")
	conjunction: str = " + "
	include_lifetimes: bool = True
	ref_style: RefStyle = RefStyle.PREFIX
	impl_trait_prefix: bool = True
	primitive_names: Mapping[str, str] = Field(
		default_factory=dict, description="Raw primitive name -> display name; unmapped names pass through"
	)
	qualified_path_style: QualifiedPathStyle = QualifiedPathStyle.BRACKETED
	no_output_marker: str | None = Field(
		None, description="Appended after ' -> ' when a function declares no output type"
	)

	@field_validator("primitive_names", mode="after")
	@classmethod
	def _freeze_primitive_names(cls, value: Mapping[str, str]) -> Mapping[str, str]:
		return MappingProxyType(dict(value))

	@field_serializer("primitive_names")
	def _dump_primitive_names(self, value: Mapping[str, str]) -> dict[str, str]:
		return dict(value)

	def __hash__(self) -> int:
		fields = {**self.__dict__, "primitive_names": frozenset(self.primitive_names.items())}
		return hash(tuple(fields.values()))

	def primitive_name(self, raw: str) -> str:
		"""Return the display name for a primitive."""
		return self.primitive_names.get(raw, raw)

	def path_name(self, path: str) -> str:
		"""Return a plain path as this dialect spells it."""
		if self.qualified_path_style is QualifiedPathStyle.DOTTED:
			return path.replace("::", ".")
		return path


NATIVE = Dialect(name="native")

_UNSIGNED = ("u8", "u16", "u32", "u64", "u128", "usize")
_SIGNED = ("i8", "i16", "i32", "i64", "i128", "isize")
_FLOATS = ("f16", "f32", "f64", "f128")
_TEXT = ("char", "str")

ALTERNATE_PRIMITIVES: Mapping[str, str] = MappingProxyType({
	"bool": "Bool",
	**dict.fromkeys(_UNSIGNED, "Nat"),
	**dict.fromkeys(_SIGNED, "Int"),
	**dict.fromkeys(_FLOATS, "Float"),
	**dict.fromkeys(_TEXT, "String"),
})

ALTERNATE = Dialect(
	name="alternate",
	generic_enclosure=("(", ")"),
	conjunction=" and ",
	include_lifetimes=False,
	ref_style=RefStyle.WRAPPER,
	impl_trait_prefix=False,
	primitive_names=ALTERNATE_PRIMITIVES,
	qualified_path_style=QualifiedPathStyle.DOTTED,
	no_output_marker="NoneType",
)

BUILTIN_DIALECTS: dict[str, Dialect] = {
	NATIVE.name: NATIVE,
	ALTERNATE.name: ALTERNATE,
}


def build_dialect(name: str, definition: Mapping[str, Any]) -> Dialect:
	"""
	Build a dialect from a configuration mapping.

	Args:
	    name: Name to register the dialect under
	    definition: Dialect fields; an optional ``base`` key names a built-in
	        dialect whose values are used for any field not given

	Returns:
	    Dialect: The validated dialect

	Raises:
	    ConfigError: If the base is unknown or a field is invalid

	"""
	if not isinstance(definition, Mapping):
		msg = f"Definition of dialect '{name}' must be a mapping"
		raise ConfigError(msg)
	fields = dict(definition)
	base_name = fields.pop("base", None)
	values: dict[str, Any] = {}
	if base_name is not None:
		base = BUILTIN_DIALECTS.get(str(base_name))
		if base is None:
			msg = f"Dialect '{name}' extends unknown base dialect '{base_name}'"
			raise ConfigError(msg)
		values = base.model_dump()
	values.update(fields)
	values["name"] = name
	try:
		return Dialect.model_validate(values)
	except ValidationError as e:
		msg = f"Invalid definition for dialect '{name}': {e}"
		raise ConfigError(msg) from e


def load_dialects(custom: Mapping[str, Mapping[str, Any]] | None = None) -> dict[str, Dialect]:
	"""Return the built-in dialects merged with custom definitions from config."""
	dialects = dict(BUILTIN_DIALECTS)
	for name, definition in (custom or {}).items():
		if name in BUILTIN_DIALECTS:
			logger.warning("Custom dialect '%s' overrides the built-in dialect of the same name", name)
		dialects[name] = build_dialect(name, definition)
	return dialects


def available_dialects(custom: Mapping[str, Mapping[str, Any]] | None = None) -> list[str]:
	"""List the names of all resolvable dialects."""
	return sorted(load_dialects(custom))


def get_dialect(name: str, custom: Mapping[str, Mapping[str, Any]] | None = None) -> Dialect:
	"""
	Resolve a dialect by name.

	Args:
	    name: Dialect name (``native``, ``alternate`` or a configured one)
	    custom: Custom dialect definitions, usually the ``render.dialects`` config section

	Returns:
	    Dialect: The resolved dialect

	Raises:
	    UnknownDialectError: If no dialect has that name

	"""
	dialects = load_dialects(custom)
	try:
		return dialects[name]
	except KeyError:
		raise UnknownDialectError(name, sorted(dialects)) from None
