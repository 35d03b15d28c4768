"""Item graph over a rustdoc JSON document."""

from __future__ import annotations

import json
import logging
from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import ValidationError

from crate_inspector.errors import CrateLoadError, UnknownReferenceError

from .items import (
	VIEW_TYPES,
	ConstantItem,
	CrateItem,
	EnumItem,
	FunctionItem,
	ImplItem,
	MacroItem,
	ModuleItem,
	StaticItem,
	StructItem,
	TraitItem,
)
from .schema import Item, ItemKind, ItemSummary, RustdocCrate

if TYPE_CHECKING:
	from collections.abc import Iterator

logger = logging.getLogger(__name__)

V = TypeVar("V", bound=CrateItem)


class Crate:
	"""
	A documented crate: the index of items keyed by id plus name lookup.

	Items of external crates that the documented crate references are part
	of the index too; ``items()`` and the root-level iterators only yield the
	crate's own items.

	"""

	def __init__(self, document: RustdocCrate) -> None:
		self.document = document

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> Crate:
		"""
		Build a crate from a decoded rustdoc JSON document.

		Raises:
		    CrateLoadError: If the document does not have the rustdoc JSON shape

		"""
		try:
			document = RustdocCrate.model_validate(data)
		except ValidationError as e:
			msg = f"Invalid rustdoc JSON document: {e}"
			raise CrateLoadError(msg) from e
		if document.root not in document.index:
			msg = f"Root module {document.root} is missing from the index"
			raise CrateLoadError(msg)
		logger.debug("Loaded crate with %d items (format version %d)", len(document.index), document.format_version)
		return cls(document)

	@classmethod
	def from_json(cls, text: str | bytes) -> Crate:
		try:
			data = json.loads(text)
		except json.JSONDecodeError as e:
			msg = f"Malformed rustdoc JSON: {e}"
			raise CrateLoadError(msg) from e
		if not isinstance(data, dict):
			msg = "rustdoc JSON document must be an object"
			raise CrateLoadError(msg)
		return cls.from_dict(data)

	@classmethod
	def from_path(cls, path: str | Path) -> Crate:
		"""
		Load a crate from a rustdoc JSON file.

		Args:
		    path: Path to the ``<crate>.json`` file written by rustdoc

		Returns:
		    The loaded crate

		Raises:
		    CrateLoadError: If the file cannot be read or parsed

		"""
		path = Path(path)
		logger.debug("Reading rustdoc JSON from %s", path)
		try:
			text = path.read_text(encoding="utf-8")
		except OSError as e:
			msg = f"Could not read {path}: {e}"
			raise CrateLoadError(msg) from e
		return cls.from_json(text)

	def __repr__(self) -> str:
		return f"Crate(root={self.root!r}, name={self.name!r}, items={len(self.document.index)})"

	@property
	def root(self) -> str:
		return self.document.root

	@property
	def name(self) -> str | None:
		return self.root_module().name

	@property
	def crate_version(self) -> str | None:
		return self.document.crate_version

	@property
	def format_version(self) -> int:
		return self.document.format_version

	@property
	def includes_private(self) -> bool:
		return self.document.includes_private

	def root_module(self) -> ModuleItem:
		root = self.downcast(self.get(self.root), ModuleItem)
		if root is None:
			raise UnknownReferenceError(self.root, "root item is not a module")
		return root

	def all_items(self) -> Iterator[Item]:
		"""Every item of the index, including items of external crates."""
		return iter(self.document.index.values())

	def items(self) -> Iterator[Item]:
		"""Items that belong to this crate."""
		return (item for item in self.document.index.values() if item.crate_id == 0)

	def item_summary(self) -> dict[str, ItemSummary]:
		return self.document.paths

	def get(self, item_id: Any) -> Item:
		"""
		Look up an item by id.

		Raises:
		    UnknownReferenceError: If no item has the id

		"""
		item = self.document.index.get(str(item_id))
		if item is None:
			raise UnknownReferenceError(str(item_id))
		return item

	def downcast(self, item: Item, view_cls: type[V]) -> V | None:
		"""Wrap the item in ``view_cls`` when its kind tag matches, else return None."""
		if item.kind is not view_cls.KIND:
			return None
		return view_cls(self, item)

	def view(self, item: Item) -> CrateItem | None:
		"""Wrap the item in the view registered for its kind."""
		view_cls = VIEW_TYPES.get(item.kind)
		return view_cls(self, item) if view_cls is not None else None

	def _all_of(self, view_cls: type[V]) -> Iterator[V]:
		for item in self.document.index.values():
			view = self.downcast(item, view_cls)
			if view is not None:
				yield view

	def _root_of(self, view_cls: type[V]) -> Iterator[V]:
		root = self.root_module()
		for item in root.items():
			view = self.downcast(item, view_cls)
			if view is not None:
				yield view

	@cached_property
	def _parents(self) -> dict[str, str]:
		parents: dict[str, str] = {}
		for module in self._all_of(ModuleItem):
			for child in module.item_ids():
				parents.setdefault(child, module.id)
		return parents

	@cached_property
	def _impl_owners(self) -> dict[str, str]:
		owners: dict[str, str] = {}
		for impl in self._all_of(ImplItem):
			for child in impl.item_ids():
				owners.setdefault(child, impl.id)
		return owners

	def parent_module(self, item_id: str) -> ModuleItem | None:
		parent = self._parents.get(item_id)
		return self.downcast(self.get(parent), ModuleItem) if parent is not None else None

	def owning_impl(self, item_id: str) -> ImplItem | None:
		owner = self._impl_owners.get(item_id)
		return self.downcast(self.get(owner), ImplItem) if owner is not None else None

	def all_modules(self) -> Iterator[ModuleItem]:
		return self._all_of(ModuleItem)

	def modules(self) -> Iterator[ModuleItem]:
		"""Crate-local modules, the root module included."""
		return (module for module in self._all_of(ModuleItem) if module.is_crate_item())

	def sub_modules(self) -> Iterator[ModuleItem]:
		return (module for module in self.modules() if module.id != self.root)

	def all_functions(self) -> Iterator[FunctionItem]:
		return self._all_of(FunctionItem)

	def functions(self) -> Iterator[FunctionItem]:
		"""Free functions with a body directly in the root module."""
		for function in self._root_of(FunctionItem):
			if function.has_body and not function.is_method() and not function.is_associated():
				yield function

	def all_constants(self) -> Iterator[ConstantItem]:
		return self._all_of(ConstantItem)

	def constants(self) -> Iterator[ConstantItem]:
		return self._root_of(ConstantItem)

	def all_statics(self) -> Iterator[StaticItem]:
		return self._all_of(StaticItem)

	def statics(self) -> Iterator[StaticItem]:
		return self._root_of(StaticItem)

	def all_structs(self) -> Iterator[StructItem]:
		return self._all_of(StructItem)

	def structs(self) -> Iterator[StructItem]:
		return self._root_of(StructItem)

	def all_traits(self) -> Iterator[TraitItem]:
		return self._all_of(TraitItem)

	def traits(self) -> Iterator[TraitItem]:
		return self._root_of(TraitItem)

	def all_enums(self) -> Iterator[EnumItem]:
		return self._all_of(EnumItem)

	def enums(self) -> Iterator[EnumItem]:
		return self._root_of(EnumItem)

	def all_impls(self) -> Iterator[ImplItem]:
		return self._all_of(ImplItem)

	def impls(self) -> Iterator[ImplItem]:
		return self._root_of(ImplItem)

	def all_macros(self) -> Iterator[MacroItem]:
		return self._all_of(MacroItem)

	def macros(self) -> Iterator[MacroItem]:
		return self._root_of(MacroItem)

	def find_all(self, name: str, kind: ItemKind | str | None = None) -> list[Item]:
		"""
		Find items by name.

		A name containing ``::`` is matched against the fully qualified paths
		in the path summaries (``"my_crate::io::Reader"``); a plain name is
		matched against item names.

		Args:
		    name: Item name or qualified path
		    kind: Only return items of this kind

		Returns:
		    Matching items in index order

		"""
		wanted = ItemKind(kind) if kind is not None else None
		if "::" in name:
			ids = [item_id for item_id, summary in self.document.paths.items() if summary.qualified_name == name]
			candidates = [self.document.index[i] for i in ids if i in self.document.index]
		else:
			candidates = [item for item in self.document.index.values() if item.name == name]
		return [item for item in candidates if wanted is None or item.kind is wanted]

	def find(self, name: str, kind: ItemKind | str | None = None) -> Item | None:
		"""Return the first item ``find_all`` would return, or None."""
		matches = self.find_all(name, kind)
		return matches[0] if matches else None
