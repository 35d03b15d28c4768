"""
Type-expression renderer.

Turns a type-expression tree into source text for a given dialect. Every
entry point is a pure function of its arguments: the dialect is passed
explicitly through each recursive call and nothing is cached, so a tree can
be rendered concurrently from several threads.

Dispatch over each closed union is a ``match`` whose fallback takes a
``Never`` argument, so a type checker reports any variant that is added to the
model without a rendering rule. Members that are modelled but have no
rendering rule (const generics, outlives/use bounds) raise
``UnsupportedNodeKindError``.

"""

from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any, Never, NoReturn

from crate_inspector.errors import RenderDepthError, UnsupportedNodeKindError
from crate_inspector.types.model import (
	AngleBracketed,
	Array,
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
	Tuple,
	Type,
	TypeArg,
	TypeParam,
	Use,
)

from .dialect import NATIVE, Dialect, QualifiedPathStyle, RefStyle

if TYPE_CHECKING:
	from collections.abc import Callable, Iterator

# Each level of type nesting costs a few interpreter frames, keep well under the recursion limit.
DEFAULT_MAX_DEPTH = 128


def _unsupported(node: Never) -> NoReturn:
	raise UnsupportedNodeKindError(type(node).__name__, node)


class _Renderer:
	"""One render pass: a dialect plus the current nesting depth."""

	def __init__(self, dialect: Dialect, max_depth: int) -> None:
		self.dialect = dialect
		self.max_depth = max_depth
		self._depth = 0

	@contextlib.contextmanager
	def _descend(self) -> Iterator[None]:
		if self._depth >= self.max_depth:
			raise RenderDepthError(self.max_depth)
		self._depth += 1
		try:
			yield
		finally:
			self._depth -= 1

	# --- Signatures, paths and arguments --- #

	def signature(self, sig: FunctionSignature) -> str:
		params = ", ".join(f"{name}: {self.type_(ty)}" for name, ty in sig.inputs)
		text = f"({params})"
		if sig.output is not None:
			text += f" -> {self.type_(sig.output)}"
		elif self.dialect.no_output_marker is not None:
			text += f" -> {self.dialect.no_output_marker}"
		return text

	def path(self, path: Path) -> str:
		text = self.dialect.path_name(path.path)
		if path.args is not None:
			text += self.generic_args(path.args)
		return text

	def generic_args(self, args: GenericArgs) -> str:
		match args:
			case AngleBracketed(args=items):
				if not items:
					return ""
				open_token, close_token = self.dialect.generic_enclosure
				return open_token + ", ".join(self.generic_arg(arg) for arg in items) + close_token
			case Parenthesized(inputs=inputs, output=output):
				text = "(" + ", ".join(self.type_(ty) for ty in inputs) + ")"
				if output is not None:
					text += f" -> {self.type_(output)}"
				return text
			case ReturnTypeNotation():
				return "(..)"
			case _:
				_unsupported(args)

	def generic_arg(self, arg: GenericArg) -> str:
		match arg:
			case TypeArg(type=ty):
				return self.type_(ty)
			case LifetimeArg(name=name):
				return name
			case InferArg():
				return "_"
			case ConstArg():
				raise UnsupportedNodeKindError("ConstArg", arg)
			case _:
				_unsupported(arg)

	# --- Bounds and generic parameters --- #

	def bound(self, bound: GenericBound) -> str:
		match bound:
			case TraitBound(trait=trait, generic_params=params):
				prefix = "for<" + ", ".join(self.generic_param(p) for p in params) + "> " if params else ""
				return prefix + self.path(trait)
			case Outlives() | Use():
				raise UnsupportedNodeKindError(type(bound).__name__, bound)
			case _:
				_unsupported(bound)

	def poly_trait(self, poly: PolyTrait) -> str:
		return self.path(poly.trait) + "".join(self.generic_param(p) for p in poly.generic_params)

	def generic_param(self, param: GenericParamDef) -> str:
		conjunction = self.dialect.conjunction
		text = param.name
		match param.kind:
			case LifetimeParam(outlives=outlives):
				if outlives:
					text += f": {conjunction.join(outlives)}"
			case TypeParam(bounds=bounds, default=default):
				if bounds:
					text += f": {conjunction.join(self.bound(b) for b in bounds)}"
				if default is not None:
					text += f" = {self.type_(default)}"
			case ConstParam():
				raise UnsupportedNodeKindError("ConstParam", param)
			case _:
				_unsupported(param.kind)
		return text

	# --- Types --- #

	def type_(self, ty: Type) -> str:
		with self._descend():
			return self._type_body(ty)

	def _type_body(self, ty: Type) -> str:  # noqa: C901, PLR0911
		dialect = self.dialect
		match ty:
			case Primitive(name=name):
				return dialect.primitive_name(name)
			case ResolvedPath(path=path):
				return self.path(path)
			case FunctionPointer(signature=sig):
				return ("fn" if dialect.impl_trait_prefix else "") + self.signature(sig)
			case DynTrait(traits=traits, lifetime=lifetime):
				text = ("dyn " if dialect.impl_trait_prefix else "") + dialect.conjunction.join(
					self.poly_trait(t) for t in traits
				)
				if dialect.include_lifetimes and lifetime is not None:
					text += dialect.conjunction + lifetime
				return text
			case ImplTrait(bounds=bounds):
				return ("impl " if dialect.impl_trait_prefix else "") + dialect.conjunction.join(
					self.bound(b) for b in bounds
				)
			case BorrowedRef():
				return self._borrowed_ref(ty)
			case RawPointer(type=inner, is_mutable=is_mutable):
				return "*" + ("mut " if is_mutable else "") + self.type_(inner)
			case Slice(type=inner):
				return f"[{self._element(inner)}]"
			case Array(type=inner, len=length):
				return f"[{self._element(inner)}; {length}]"
			case Tuple(types=types):
				# A one-element tuple renders as "(T)", the same text as a parenthesised type.
				return "(" + ", ".join(self._element(t) for t in types) + ")"
			case Infer():
				return "_"
			case Generic(name=name):
				return name
			case QualifiedPath():
				return self._qualified_path(ty)
			case Pat(type=inner):
				return self.type_(inner)
			case _:
				_unsupported(ty)

	def _element(self, ty: Type) -> str:
		"""Render a slice, array or tuple element; primitive elements keep their raw name."""
		if isinstance(ty, Primitive):
			with self._descend():
				return ty.name
		return self.type_(ty)

	def _borrowed_ref(self, ref: BorrowedRef) -> str:
		dialect = self.dialect
		lifetime = f"{ref.lifetime} " if dialect.include_lifetimes and ref.lifetime is not None else ""
		inner = self.type_(ref.type)
		if dialect.ref_style is RefStyle.WRAPPER:
			wrapper = "RefMut" if ref.is_mutable else "Ref"
			return f"{wrapper}({lifetime}{inner})"
		return "&" + ("mut " if ref.is_mutable else "") + lifetime + inner

	def _qualified_path(self, qpath: QualifiedPath) -> str:
		self_type = self.type_(qpath.self_type)
		if self.dialect.qualified_path_style is QualifiedPathStyle.DOTTED:
			qualifier = f"|<: {self.path(qpath.trait)}|" if qpath.trait is not None else ""
			return f"{self_type}{qualifier}.{qpath.name}({self._dotted_args(qpath.args)})"
		qualifier = f" as {self.path(qpath.trait)}" if qpath.trait is not None else ""
		args = self.generic_args(qpath.args) if qpath.args is not None else ""
		return f"<{self_type}{qualifier}>::{qpath.name}{args}"

	def _dotted_args(self, args: GenericArgs | None) -> str:
		match args:
			case None:
				return ""
			case AngleBracketed(args=items):
				return ", ".join(self.generic_arg(arg) for arg in items)
			case Parenthesized(inputs=inputs):
				return ", ".join(self.type_(ty) for ty in inputs)
			case ReturnTypeNotation():
				return ".."
			case _:
				_unsupported(args)


def _run(node: Any, render_fn: Callable[[_Renderer, Any], str], dialect: Dialect, max_depth: int) -> str:
	renderer = _Renderer(dialect, max_depth)
	try:
		return render_fn(renderer, node)
	except RecursionError as e:
		raise RenderDepthError(max_depth) from e


def render(node: Type, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
	"""
	Render a type expression.

	Args:
	    node: The type-expression tree
	    dialect: Output dialect (defaults to native Rust syntax)
	    max_depth: Maximum type nesting depth before giving up

	Returns:
	    str: The rendered text

	Raises:
	    UnsupportedNodeKindError: If the tree contains a node kind with no rendering rule
	    RenderDepthError: If the tree nests deeper than ``max_depth``

	"""
	return _run(node, _Renderer.type_, dialect, max_depth)


render_type = render


def render_signature(
	sig: FunctionSignature, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> str:
	"""Render a function signature as ``(name: T, ...) -> R``."""
	return _run(sig, _Renderer.signature, dialect, max_depth)


def render_path(path: Path, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
	"""Render a path with its generic arguments."""
	return _run(path, _Renderer.path, dialect, max_depth)


def render_generic_args(args: GenericArgs, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
	"""Render a generic argument list; an empty angle-bracketed list renders as ``""``."""
	return _run(args, _Renderer.generic_args, dialect, max_depth)


def render_generic_arg(arg: GenericArg, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
	return _run(arg, _Renderer.generic_arg, dialect, max_depth)


def render_bound(bound: GenericBound, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
	return _run(bound, _Renderer.bound, dialect, max_depth)


def render_poly_trait(poly: PolyTrait, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
	return _run(poly, _Renderer.poly_trait, dialect, max_depth)


def render_generic_param(
	param: GenericParamDef, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH
) -> str:
	return _run(param, _Renderer.generic_param, dialect, max_depth)
