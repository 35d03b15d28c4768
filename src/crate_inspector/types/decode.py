"""
Decoding of rustdoc JSON fragments into the type-expression model.

rustdoc serialises enums externally tagged: ``{"primitive": "u8"}``,
``{"borrowed_ref": {...}}`` or a bare string such as ``"infer"`` for
payload-less variants. Very old format versions used ``{"kind": ..., "inner": ...}``
instead; both shapes are accepted. Several keys were renamed between format
versions (``trait_`` -> ``trait``, ``decl`` -> ``sig``, ``mutable`` ->
``is_mutable``), so lookups go through ``_first_key``.

"""

from __future__ import annotations

import functools
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from crate_inspector.errors import DecodeError

from .model import (
	AngleBracketed,
	Array,
	AssocItemConstraint,
	BorrowedRef,
	ConstArg,
	ConstParam,
	DynTrait,
	FunctionPointer,
	FunctionSignature,
	Generic,
	GenericArg,
	GenericArgs,
	GenericBound,
	GenericParamDef,
	GenericParamDefKind,
	ImplTrait,
	Infer,
	InferArg,
	LifetimeArg,
	LifetimeParam,
	Outlives,
	Parenthesized,
	Pat,
	Path,
	PolyTrait,
	Primitive,
	QualifiedPath,
	RawPointer,
	ResolvedPath,
	ReturnTypeNotation,
	Slice,
	TraitBound,
	TraitBoundModifier,
	Tuple,
	Type,
	TypeArg,
	TypeParam,
	Use,
)

_MISSING = object()

T = TypeVar("T")


def _bounded(decoder: Callable[[Any], T]) -> Callable[[Any], T]:
	"""Report input nested too deeply for the interpreter stack as a ``DecodeError``."""

	@functools.wraps(decoder)
	def wrapper(data: Any) -> T:
		try:
			return decoder(data)
		except RecursionError as e:
			msg = f"rustdoc JSON nests too deeply to decode (in {decoder.__name__})"
			raise DecodeError(msg) from e

	return wrapper


def _split_tagged(value: Any, what: str) -> tuple[str, Any]:
	"""Return ``(tag, payload)`` for an externally tagged enum value."""
	if isinstance(value, str):
		return value, None
	if isinstance(value, Mapping):
		if len(value) == 1:
			((tag, payload),) = value.items()
			return tag, payload
		if set(value) == {"kind", "inner"} and isinstance(value["kind"], str):
			return value["kind"], value["inner"]
	msg = f"Malformed {what}: expected a tagged value, got {value!r}"
	raise DecodeError(msg)


def _first_key(payload: Any, *keys: str, what: str, default: Any = _MISSING) -> Any:
	"""Look up the first present key, covering renamed rustdoc fields."""
	if not isinstance(payload, Mapping):
		msg = f"Malformed {what}: expected an object, got {payload!r}"
		raise DecodeError(msg)
	for key in keys:
		if key in payload:
			return payload[key]
	if default is _MISSING:
		msg = f"Malformed {what}: missing field {keys[0]!r}"
		raise DecodeError(msg)
	return default


def _as_list(value: Any, what: str) -> list[Any]:
	if value is None:
		return []
	if not isinstance(value, list | tuple):
		msg = f"Malformed {what}: expected a list, got {value!r}"
		raise DecodeError(msg)
	return list(value)


def _optional_str(value: Any) -> str | None:
	return None if value is None else str(value)


# --- Paths and generic arguments --- #


@_bounded
def decode_path(data: Any) -> Path:
	"""Decode a rustdoc ``Path`` object."""
	name = _first_key(data, "path", "name", what="path")
	raw_args = _first_key(data, "args", what="path", default=None)
	return Path(
		path=str(name),
		id=_optional_str(_first_key(data, "id", what="path", default=None)),
		args=decode_generic_args(raw_args) if raw_args is not None else None,
	)


@_bounded
def decode_generic_args(data: Any) -> GenericArgs:
	"""Decode a rustdoc ``GenericArgs`` value."""
	tag, payload = _split_tagged(data, "generic args")
	if tag == "angle_bracketed":
		args = _first_key(payload, "args", what="angle-bracketed args", default=[])
		constraints = _first_key(payload, "constraints", "bindings", what="angle-bracketed args", default=[])
		return AngleBracketed(
			args=tuple(decode_generic_arg(arg) for arg in _as_list(args, "generic arg list")),
			constraints=tuple(_decode_constraint(c) for c in _as_list(constraints, "constraint list")),
		)
	if tag == "parenthesized":
		inputs = _first_key(payload, "inputs", what="parenthesized args", default=[])
		output = _first_key(payload, "output", what="parenthesized args", default=None)
		return Parenthesized(
			inputs=tuple(decode_type(t) for t in _as_list(inputs, "parenthesized inputs")),
			output=decode_type(output) if output is not None else None,
		)
	if tag == "return_type_notation":
		return ReturnTypeNotation()
	msg = f"Unknown generic args kind: {tag!r}"
	raise DecodeError(msg)


@_bounded
def decode_generic_arg(data: Any) -> GenericArg:
	"""Decode a rustdoc ``GenericArg`` value."""
	tag, payload = _split_tagged(data, "generic arg")
	if tag == "type":
		return TypeArg(decode_type(payload))
	if tag == "lifetime":
		return LifetimeArg(str(payload))
	if tag == "infer":
		return InferArg()
	if tag == "const":
		return ConstArg(
			expr=str(_first_key(payload, "expr", what="const arg", default="")),
			value=_optional_str(_first_key(payload, "value", what="const arg", default=None)),
			is_literal=bool(_first_key(payload, "is_literal", what="const arg", default=False)),
		)
	msg = f"Unknown generic arg kind: {tag!r}"
	raise DecodeError(msg)


def _decode_constraint(data: Any) -> AssocItemConstraint:
	raw_args = _first_key(data, "args", what="constraint", default=None)
	binding = _first_key(data, "binding", what="constraint", default=None)
	equality: Type | None = None
	bounds: tuple[GenericBound, ...] = ()
	if binding is not None:
		tag, payload = _split_tagged(binding, "constraint binding")
		if tag == "equality":
			# Equality terms are either {"type": ...} or {"constant": ...}; only types are kept.
			term_tag, term = _split_tagged(payload, "constraint term")
			if term_tag == "type":
				equality = decode_type(term)
		elif tag == "constraint":
			bounds = tuple(decode_bound(b) for b in _as_list(payload, "constraint bounds"))
		else:
			msg = f"Unknown constraint binding kind: {tag!r}"
			raise DecodeError(msg)
	return AssocItemConstraint(
		name=str(_first_key(data, "name", what="constraint")),
		args=decode_generic_args(raw_args) if raw_args is not None else None,
		equality=equality,
		bounds=bounds,
	)


# --- Bounds and generic parameters --- #


@_bounded
def decode_bound(data: Any) -> GenericBound:
	"""Decode a rustdoc ``GenericBound`` value."""
	tag, payload = _split_tagged(data, "generic bound")
	if tag == "trait_bound":
		modifier = _first_key(payload, "modifier", what="trait bound", default="none")
		try:
			parsed_modifier = TraitBoundModifier(modifier)
		except ValueError as e:
			msg = f"Unknown trait bound modifier: {modifier!r}"
			raise DecodeError(msg) from e
		return TraitBound(
			trait=decode_path(_first_key(payload, "trait", "trait_", what="trait bound")),
			generic_params=_decode_params(_first_key(payload, "generic_params", what="trait bound", default=[])),
			modifier=parsed_modifier,
		)
	if tag == "outlives":
		return Outlives(str(payload))
	if tag == "use":
		return Use(tuple(_decode_use_arg(arg) for arg in _as_list(payload, "use bound")))
	msg = f"Unknown generic bound kind: {tag!r}"
	raise DecodeError(msg)


def _decode_use_arg(data: Any) -> str:
	if isinstance(data, str):
		return data
	_, payload = _split_tagged(data, "use bound argument")
	return str(payload)


@_bounded
def decode_poly_trait(data: Any) -> PolyTrait:
	"""Decode a rustdoc ``PolyTrait`` object."""
	return PolyTrait(
		trait=decode_path(_first_key(data, "trait", "trait_", what="poly trait")),
		generic_params=_decode_params(_first_key(data, "generic_params", what="poly trait", default=[])),
	)


@_bounded
def decode_generic_param(data: Any) -> GenericParamDef:
	"""Decode a rustdoc ``GenericParamDef`` object."""
	name = _first_key(data, "name", what="generic param")
	tag, payload = _split_tagged(_first_key(data, "kind", what="generic param"), "generic param kind")
	kind: GenericParamDefKind
	if tag == "lifetime":
		outlives = _first_key(payload, "outlives", what="lifetime param", default=[])
		kind = LifetimeParam(tuple(str(o) for o in _as_list(outlives, "outlives list")))
	elif tag == "type":
		default = _first_key(payload, "default", what="type param", default=None)
		kind = TypeParam(
			bounds=tuple(
				decode_bound(b) for b in _as_list(_first_key(payload, "bounds", what="type param", default=[]), "bounds")
			),
			default=decode_type(default) if default is not None else None,
			is_synthetic=bool(_first_key(payload, "is_synthetic", "synthetic", what="type param", default=False)),
		)
	elif tag == "const":
		kind = ConstParam(
			type=decode_type(_first_key(payload, "type", what="const param")),
			default=_optional_str(_first_key(payload, "default", what="const param", default=None)),
		)
	else:
		msg = f"Unknown generic param kind: {tag!r}"
		raise DecodeError(msg)
	return GenericParamDef(name=str(name), kind=kind)


def _decode_params(data: Any) -> tuple[GenericParamDef, ...]:
	return tuple(decode_generic_param(p) for p in _as_list(data, "generic params"))


@_bounded
def decode_signature(data: Any) -> FunctionSignature:
	"""Decode a rustdoc ``FunctionSignature`` (``FnDecl`` in older formats)."""
	inputs = []
	for entry in _as_list(_first_key(data, "inputs", what="signature", default=[]), "signature inputs"):
		if not isinstance(entry, list | tuple) or len(entry) != 2:  # noqa: PLR2004
			msg = f"Malformed signature input: {entry!r}"
			raise DecodeError(msg)
		name, ty = entry
		inputs.append((str(name), decode_type(ty)))
	output = _first_key(data, "output", what="signature", default=None)
	return FunctionSignature(
		inputs=tuple(inputs),
		output=decode_type(output) if output is not None else None,
		is_c_variadic=bool(_first_key(data, "is_c_variadic", "c_variadic", what="signature", default=False)),
	)


# --- Types --- #


def _decode_borrowed_ref(payload: Any) -> Type:
	return BorrowedRef(
		type=decode_type(_first_key(payload, "type", what="borrowed ref")),
		is_mutable=bool(_first_key(payload, "is_mutable", "mutable", what="borrowed ref", default=False)),
		lifetime=_optional_str(_first_key(payload, "lifetime", what="borrowed ref", default=None)),
	)


def _decode_raw_pointer(payload: Any) -> Type:
	return RawPointer(
		type=decode_type(_first_key(payload, "type", what="raw pointer")),
		is_mutable=bool(_first_key(payload, "is_mutable", "mutable", what="raw pointer", default=False)),
	)


def _decode_dyn_trait(payload: Any) -> Type:
	traits = _as_list(_first_key(payload, "traits", what="dyn trait"), "dyn trait list")
	return DynTrait(
		traits=tuple(decode_poly_trait(t) for t in traits),
		lifetime=_optional_str(_first_key(payload, "lifetime", what="dyn trait", default=None)),
	)


def _decode_function_pointer(payload: Any) -> Type:
	return FunctionPointer(
		signature=decode_signature(_first_key(payload, "sig", "decl", what="function pointer")),
		generic_params=_decode_params(_first_key(payload, "generic_params", what="function pointer", default=[])),
	)


def _decode_qualified_path(payload: Any) -> Type:
	raw_args = _first_key(payload, "args", what="qualified path", default=None)
	raw_trait = _first_key(payload, "trait", "trait_", what="qualified path", default=None)
	return QualifiedPath(
		name=str(_first_key(payload, "name", what="qualified path")),
		self_type=decode_type(_first_key(payload, "self_type", what="qualified path")),
		args=decode_generic_args(raw_args) if raw_args is not None else None,
		trait=decode_path(raw_trait) if raw_trait is not None else None,
	)


def _decode_array(payload: Any) -> Type:
	return Array(
		type=decode_type(_first_key(payload, "type", what="array")),
		len=str(_first_key(payload, "len", what="array")),
	)


def _decode_pat(payload: Any) -> Type:
	return Pat(
		type=decode_type(_first_key(payload, "type", what="pattern type")),
		pattern=str(_first_key(payload, "__pat_unstable_do_not_use", what="pattern type", default="")),
	)


_TYPE_DECODERS: dict[str, Callable[[Any], Type]] = {
	"primitive": lambda payload: Primitive(str(payload)),
	"resolved_path": lambda payload: ResolvedPath(decode_path(payload)),
	"function_pointer": _decode_function_pointer,
	"dyn_trait": _decode_dyn_trait,
	"impl_trait": lambda payload: ImplTrait(tuple(decode_bound(b) for b in _as_list(payload, "impl trait"))),
	"borrowed_ref": _decode_borrowed_ref,
	"raw_pointer": _decode_raw_pointer,
	"slice": lambda payload: Slice(decode_type(payload)),
	"array": _decode_array,
	"tuple": lambda payload: Tuple(tuple(decode_type(t) for t in _as_list(payload, "tuple"))),
	"infer": lambda _payload: Infer(),
	"generic": lambda payload: Generic(str(payload)),
	"qualified_path": _decode_qualified_path,
	"pat": _decode_pat,
}


@_bounded
def decode_type(data: Any) -> Type:
	"""
	Decode a rustdoc ``Type`` value.

	Args:
	    data: The JSON value as produced by ``json.load``

	Returns:
	    Type: The decoded type-expression tree

	Raises:
	    DecodeError: If the value has an unknown tag or a malformed payload

	"""
	tag, payload = _split_tagged(data, "type")
	decoder = _TYPE_DECODERS.get(tag)
	if decoder is None:
		msg = f"Unknown type kind: {tag!r}"
		raise DecodeError(msg)
	return decoder(payload)
