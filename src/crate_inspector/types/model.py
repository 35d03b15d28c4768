"""
Type-expression model.

Frozen dataclasses mirroring the type, path, bound and generic-parameter
shapes rustdoc emits. Every union here is closed: the renderer matches on
each member explicitly, and members it cannot render (const generics,
outlives/use bounds) are still modelled so they can be reported rather than
silently dropped.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# --- Paths and generic arguments --- #


@dataclass(frozen=True)
class Path:
	"""A named, possibly generic path such as ``std::vec::Vec<u8>``."""

	path: str
	id: str | None = None
	args: GenericArgs | None = None


@dataclass(frozen=True)
class AssocItemConstraint:
	"""An associated item constraint (``Item = u8`` or ``Item: Clone``)."""

	name: str
	args: GenericArgs | None = None
	equality: Type | None = None
	bounds: tuple[GenericBound, ...] = ()


@dataclass(frozen=True)
class AngleBracketed:
	"""``<A, B>`` argument list."""

	args: tuple[GenericArg, ...] = ()
	constraints: tuple[AssocItemConstraint, ...] = ()


@dataclass(frozen=True)
class Parenthesized:
	"""``(A, B) -> C`` sugar used by the ``Fn`` family of traits."""

	inputs: tuple[Type, ...] = ()
	output: Type | None = None


@dataclass(frozen=True)
class ReturnTypeNotation:
	"""``(..)`` marker, carries no payload."""


GenericArgs = AngleBracketed | Parenthesized | ReturnTypeNotation


@dataclass(frozen=True)
class TypeArg:
	type: Type


@dataclass(frozen=True)
class LifetimeArg:
	name: str


@dataclass(frozen=True)
class InferArg:
	"""``_`` in argument position."""


@dataclass(frozen=True)
class ConstArg:
	"""A const generic argument. Not renderable."""

	expr: str
	value: str | None = None
	is_literal: bool = False


GenericArg = TypeArg | LifetimeArg | InferArg | ConstArg

# --- Bounds and generic parameters --- #


class TraitBoundModifier(Enum):
	"""Modifier attached to a trait bound."""

	NONE = "none"
	MAYBE = "maybe"
	MAYBE_CONST = "maybe_const"


@dataclass(frozen=True)
class TraitBound:
	trait: Path
	generic_params: tuple[GenericParamDef, ...] = ()
	modifier: TraitBoundModifier = TraitBoundModifier.NONE


@dataclass(frozen=True)
class Outlives:
	"""``'a`` as a bound. Not renderable."""

	lifetime: str


@dataclass(frozen=True)
class Use:
	"""``use<'a, T>`` precise-capturing bound. Not renderable."""

	args: tuple[str, ...] = ()


GenericBound = TraitBound | Outlives | Use


@dataclass(frozen=True)
class PolyTrait:
	"""A trait object bound, optionally higher-ranked."""

	trait: Path
	generic_params: tuple[GenericParamDef, ...] = ()


@dataclass(frozen=True)
class LifetimeParam:
	outlives: tuple[str, ...] = ()


@dataclass(frozen=True)
class TypeParam:
	bounds: tuple[GenericBound, ...] = ()
	default: Type | None = None
	is_synthetic: bool = False


@dataclass(frozen=True)
class ConstParam:
	"""A const generic parameter. Not renderable."""

	type: Type
	default: str | None = None


GenericParamDefKind = LifetimeParam | TypeParam | ConstParam


@dataclass(frozen=True)
class GenericParamDef:
	name: str
	kind: GenericParamDefKind


@dataclass(frozen=True)
class FunctionSignature:
	"""Parameter list and return type of a function or function pointer."""

	inputs: tuple[tuple[str, Type], ...] = ()
	output: Type | None = None
	is_c_variadic: bool = False


# --- Types --- #


@dataclass(frozen=True)
class Primitive:
	name: str


@dataclass(frozen=True)
class ResolvedPath:
	path: Path


@dataclass(frozen=True)
class FunctionPointer:
	signature: FunctionSignature
	generic_params: tuple[GenericParamDef, ...] = ()


@dataclass(frozen=True)
class DynTrait:
	traits: tuple[PolyTrait, ...]
	lifetime: str | None = None


@dataclass(frozen=True)
class ImplTrait:
	bounds: tuple[GenericBound, ...]


@dataclass(frozen=True)
class BorrowedRef:
	type: Type
	is_mutable: bool = False
	lifetime: str | None = None


@dataclass(frozen=True)
class RawPointer:
	type: Type
	is_mutable: bool = False


@dataclass(frozen=True)
class Slice:
	type: Type


@dataclass(frozen=True)
class Array:
	type: Type
	len: str


@dataclass(frozen=True)
class Tuple:
	types: tuple[Type, ...] = ()


@dataclass(frozen=True)
class Infer:
	"""An elided type, ``_``."""


@dataclass(frozen=True)
class Generic:
	"""Reference to an enclosing generic parameter by name."""

	name: str


@dataclass(frozen=True)
class QualifiedPath:
	"""``<Self as Trait>::Name<Args>``."""

	name: str
	self_type: Type
	args: GenericArgs | None = None
	trait: Path | None = None


@dataclass(frozen=True)
class Pat:
	"""Pattern-refined type; renders as its inner type."""

	type: Type
	pattern: str = ""


Type = (
	Primitive
	| ResolvedPath
	| FunctionPointer
	| DynTrait
	| ImplTrait
	| BorrowedRef
	| RawPointer
	| Slice
	| Array
	| Tuple
	| Infer
	| Generic
	| QualifiedPath
	| Pat
)

UNIT = Tuple(())
