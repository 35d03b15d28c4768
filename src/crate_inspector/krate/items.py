"""
Typed views over crate index items.

Each view class handles exactly one ``ItemKind`` and exposes the same base
interface (crate, item, payload, id, name). Which class applies to an item is
decided by its kind tag, never by inspecting Python types, so
``Crate.downcast(item, StructItem)`` is a tag comparison.

Views resolve ids through the crate index; an id that is missing, or that
points at an item of the wrong kind, raises ``UnknownReferenceError``.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from crate_inspector.errors import MissingNameError, UnknownReferenceError
from crate_inspector.render import NATIVE, Dialect
from crate_inspector.render.renderer import DEFAULT_MAX_DEPTH, render, render_generic_param, render_path, render_signature
from crate_inspector.types import (
	FunctionSignature,
	GenericParamDef,
	Path,
	ResolvedPath,
	Type,
	TypeParam,
	decode_generic_param,
	decode_path,
	decode_signature,
	decode_type,
)

from .schema import Item, ItemKind

if TYPE_CHECKING:
	from collections.abc import Iterator

	from .crate import Crate

V = TypeVar("V", bound="CrateItem")


def _field(payload: Any, *keys: str, default: Any = None) -> Any:
	"""Read a payload field under its current or older name."""
	if not isinstance(payload, dict):
		return default
	for key in keys:
		if key in payload:
			return payload[key]
	return default


def _generic_params(payload: Any) -> tuple[GenericParamDef, ...]:
	generics = _field(payload, "generics", default={}) or {}
	return tuple(decode_generic_param(p) for p in _field(generics, "params", default=[]) or [])


def _render_generics(params: tuple[GenericParamDef, ...], dialect: Dialect, max_depth: int) -> str:
	# impl-Trait arguments appear as synthetic type params; they are already visible in the signature
	visible = [p for p in params if not (isinstance(p.kind, TypeParam) and p.kind.is_synthetic)]
	if not visible:
		return ""
	open_token, close_token = dialect.generic_enclosure
	rendered = ", ".join(render_generic_param(p, dialect, max_depth=max_depth) for p in visible)
	return f"{open_token}{rendered}{close_token}"


@dataclass(frozen=True)
class CrateItem:
	"""Base view: an index item paired with the crate it belongs to."""

	KIND: ClassVar[ItemKind]

	krate: Crate
	item: Item

	@property
	def inner(self) -> Any:
		"""The kind-specific payload of the item."""
		return self.item.payload

	@property
	def id(self) -> str:
		return self.item.id

	@property
	def name(self) -> str | None:
		"""The item's name, or None for unnamed items such as impls."""
		return self.item.name

	def require_name(self) -> str:
		"""
		Return the item's name.

		Raises:
		    MissingNameError: If the item has no name

		"""
		if self.item.name is None:
			raise MissingNameError(self.item.id)
		return self.item.name

	@property
	def docs(self) -> str | None:
		return self.item.docs

	def is_crate_item(self) -> bool:
		return self.item.crate_id == 0

	def is_external_item(self) -> bool:
		return self.item.crate_id != 0

	def module(self) -> ModuleItem | None:
		"""The module that lists this item, if any."""
		return self.krate.parent_module(self.item.id)

	def is_root_item(self) -> bool:
		"""Whether the item is listed directly in the crate's root module."""
		parent = self.module()
		return parent is not None and parent.id == self.krate.root

	def _resolve(self, item_id: Any, view_cls: type[V]) -> V:
		item = self.krate.get(item_id)
		view = self.krate.downcast(item, view_cls)
		if view is None:
			raise UnknownReferenceError(str(item_id), f"expected {view_cls.KIND.value}, found {item.tag}")
		return view


class _ChildItems:
	"""Kind-filtered iteration over the items a module or impl lists."""

	krate: Crate

	def item_ids(self) -> list[str]:
		raise NotImplementedError

	def items(self) -> Iterator[Item]:
		for item_id in self.item_ids():
			yield self.krate.get(item_id)

	def _children(self, view_cls: type[V]) -> Iterator[V]:
		for item in self.items():
			view = self.krate.downcast(item, view_cls)
			if view is not None:
				yield view

	def constants(self) -> Iterator[ConstantItem]:
		return self._children(ConstantItem)

	def functions(self) -> Iterator[FunctionItem]:
		return self._children(FunctionItem)

	def structs(self) -> Iterator[StructItem]:
		return self._children(StructItem)

	def enums(self) -> Iterator[EnumItem]:
		return self._children(EnumItem)

	def traits(self) -> Iterator[TraitItem]:
		return self._children(TraitItem)

	def impls(self) -> Iterator[ImplItem]:
		return self._children(ImplItem)


@dataclass(frozen=True)
class ModuleItem(_ChildItems, CrateItem):
	KIND: ClassVar[ItemKind] = ItemKind.MODULE

	def item_ids(self) -> list[str]:
		return [str(i) for i in _field(self.inner, "items", default=[]) or []]

	@property
	def is_crate_root(self) -> bool:
		return bool(_field(self.inner, "is_crate", default=False))


@dataclass(frozen=True)
class FunctionItem(CrateItem):
	KIND: ClassVar[ItemKind] = ItemKind.FUNCTION

	@property
	def signature(self) -> FunctionSignature:
		return decode_signature(_field(self.inner, "sig", "decl", default={}))

	@property
	def inputs(self) -> tuple[tuple[str, Type], ...]:
		return self.signature.inputs

	@property
	def output(self) -> Type | None:
		return self.signature.output

	@property
	def generics(self) -> tuple[GenericParamDef, ...]:
		return _generic_params(self.inner)

	@property
	def has_body(self) -> bool:
		return bool(_field(self.inner, "has_body", default=True))

	def is_method(self) -> bool:
		"""Whether the first parameter is ``self``."""
		inputs = self.inputs
		return bool(inputs) and inputs[0][0] == "self"

	def associated_impl(self) -> ImplItem | None:
		"""The impl block that lists this function, if any."""
		return self.krate.owning_impl(self.item.id)

	def is_associated(self) -> bool:
		return self.associated_impl() is not None

	def render_signature(self, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
		return render_signature(self.signature, dialect, max_depth=max_depth)

	def render_declaration(self, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
		"""Render ``name<generics>(params) -> output``."""
		generics = _render_generics(self.generics, dialect, max_depth)
		return f"{self.require_name()}{generics}{self.render_signature(dialect, max_depth=max_depth)}"


class _TypedItem(CrateItem):
	"""Views whose payload declares a type."""

	@property
	def type(self) -> Type:
		raise NotImplementedError

	def render_type(self, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
		return render(self.type, dialect, max_depth=max_depth)


@dataclass(frozen=True)
class ConstantItem(_TypedItem):
	KIND: ClassVar[ItemKind] = ItemKind.CONSTANT

	@property
	def type(self) -> Type:
		return decode_type(_field(self.inner, "type"))

	@property
	def expr(self) -> str:
		# Newer formats nest expr/value under "const"
		const = _field(self.inner, "const", default=self.inner)
		return str(_field(const, "expr", default=""))

	@property
	def value(self) -> str | None:
		const = _field(self.inner, "const", default=self.inner)
		value = _field(const, "value")
		return None if value is None else str(value)


@dataclass(frozen=True)
class StaticItem(_TypedItem):
	KIND: ClassVar[ItemKind] = ItemKind.STATIC

	@property
	def type(self) -> Type:
		return decode_type(_field(self.inner, "type"))

	@property
	def is_mutable(self) -> bool:
		return bool(_field(self.inner, "is_mutable", "mutable", default=False))

	@property
	def expr(self) -> str:
		return str(_field(self.inner, "expr", default=""))


@dataclass(frozen=True)
class FieldItem(_TypedItem):
	KIND: ClassVar[ItemKind] = ItemKind.STRUCT_FIELD

	@property
	def type(self) -> Type:
		return decode_type(self.inner)


def _fields_of(kind: Any, fields_key: str) -> list[str]:
	"""Field ids of a struct or variant kind; unit kinds have none, stripped tuple fields are skipped."""
	if not isinstance(kind, dict):
		return []
	if "tuple" in kind:
		return [str(i) for i in kind["tuple"] or [] if i is not None]
	body = kind.get(fields_key)
	return [str(i) for i in _field(body, "fields", default=[]) or []]


class _ImplTarget(CrateItem):
	"""Structs and enums: types that impl blocks can target."""

	@property
	def generics(self) -> tuple[GenericParamDef, ...]:
		return _generic_params(self.inner)

	def impls(self) -> Iterator[ImplItem]:
		"""Impl blocks whose self type resolves to this item."""
		for impl in self.krate.all_impls():
			for_type = impl.for_type
			if isinstance(for_type, ResolvedPath) and for_type.path.id == self.item.id:
				yield impl


@dataclass(frozen=True)
class StructItem(_ImplTarget):
	KIND: ClassVar[ItemKind] = ItemKind.STRUCT

	@property
	def kind(self) -> str:
		"""``"unit"``, ``"tuple"`` or ``"plain"``."""
		kind = _field(self.inner, "kind", "struct_type", default="unit")
		if isinstance(kind, dict):
			return next(iter(kind), "unit")
		return str(kind)

	def field_ids(self) -> list[str]:
		kind = _field(self.inner, "kind")
		if kind is None:
			# Older formats keep fields at the top level
			return [str(i) for i in _field(self.inner, "fields", default=[]) or []]
		return _fields_of(kind, "plain")

	def fields(self) -> Iterator[FieldItem]:
		for field_id in self.field_ids():
			yield self._resolve(field_id, FieldItem)


@dataclass(frozen=True)
class Discriminant:
	"""Explicit enum discriminant."""

	expr: str
	value: str


@dataclass(frozen=True)
class VariantItem(CrateItem):
	KIND: ClassVar[ItemKind] = ItemKind.VARIANT

	@property
	def discriminant(self) -> Discriminant | None:
		raw = _field(self.inner, "discriminant")
		if not isinstance(raw, dict):
			return None
		return Discriminant(expr=str(raw.get("expr", "")), value=str(raw.get("value", "")))

	def field_ids(self) -> list[str]:
		return _fields_of(_field(self.inner, "kind"), "struct")

	def fields(self) -> Iterator[FieldItem]:
		for field_id in self.field_ids():
			yield self._resolve(field_id, FieldItem)


@dataclass(frozen=True)
class EnumItem(_ImplTarget):
	KIND: ClassVar[ItemKind] = ItemKind.ENUM

	def variant_ids(self) -> list[str]:
		return [str(i) for i in _field(self.inner, "variants", default=[]) or []]

	def variants(self) -> Iterator[VariantItem]:
		for variant_id in self.variant_ids():
			yield self._resolve(variant_id, VariantItem)


@dataclass(frozen=True)
class TraitItem(CrateItem):
	KIND: ClassVar[ItemKind] = ItemKind.TRAIT

	def item_ids(self) -> list[str]:
		return [str(i) for i in _field(self.inner, "items", default=[]) or []]

	def items(self) -> Iterator[Item]:
		for item_id in self.item_ids():
			yield self.krate.get(item_id)

	@property
	def is_auto(self) -> bool:
		return bool(_field(self.inner, "is_auto", default=False))

	@property
	def is_unsafe(self) -> bool:
		return bool(_field(self.inner, "is_unsafe", default=False))

	@property
	def generics(self) -> tuple[GenericParamDef, ...]:
		return _generic_params(self.inner)


@dataclass(frozen=True)
class ImplItem(_ChildItems, CrateItem):
	KIND: ClassVar[ItemKind] = ItemKind.IMPL

	def item_ids(self) -> list[str]:
		return [str(i) for i in _field(self.inner, "items", default=[]) or []]

	@property
	def trait(self) -> Path | None:
		raw = _field(self.inner, "trait", "trait_")
		return decode_path(raw) if raw is not None else None

	@property
	def for_type(self) -> Type:
		return decode_type(_field(self.inner, "for", "for_"))

	@property
	def generics(self) -> tuple[GenericParamDef, ...]:
		return _generic_params(self.inner)

	@property
	def is_negative(self) -> bool:
		return bool(_field(self.inner, "is_negative", "negative", default=False))

	@property
	def is_synthetic(self) -> bool:
		return bool(_field(self.inner, "is_synthetic", "synthetic", default=False))

	def render_header(self, dialect: Dialect = NATIVE, *, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
		"""Render ``impl<generics> Trait for Type``."""
		header = "impl" + _render_generics(self.generics, dialect, max_depth) + " "
		trait = self.trait
		if trait is not None:
			header += ("!" if self.is_negative else "") + render_path(trait, dialect, max_depth=max_depth) + " for "
		return header + render(self.for_type, dialect, max_depth=max_depth)


@dataclass(frozen=True)
class MacroItem(CrateItem):
	KIND: ClassVar[ItemKind] = ItemKind.MACRO

	@property
	def source(self) -> str:
		return self.inner if isinstance(self.inner, str) else ""


VIEW_TYPES: dict[ItemKind, type[CrateItem]] = {
	view.KIND: view
	for view in (
		ModuleItem,
		FunctionItem,
		ConstantItem,
		StaticItem,
		StructItem,
		FieldItem,
		EnumItem,
		VariantItem,
		TraitItem,
		ImplItem,
		MacroItem,
	)
}
