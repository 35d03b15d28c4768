"""
Pydantic schema for rustdoc JSON documents.

Only the envelope is validated here: the crate, its index of items and the
path summaries. Each item's ``inner`` payload stays raw JSON and is decoded
on demand by the entity views, so a document from a newer rustdoc with item
kinds this tool does not know still loads.

"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator


def _coerce_id(value: Any) -> Any:
	# Ids are strings ("0:3:1234") in older formats and integers in newer ones
	if isinstance(value, int) and not isinstance(value, bool):
		return str(value)
	return value


Id = Annotated[str, BeforeValidator(_coerce_id)]


class ItemKind(str, Enum):
	"""Item kinds as tagged in ``Item.inner``."""

	MODULE = "module"
	EXTERN_CRATE = "extern_crate"
	USE = "use"
	UNION = "union"
	STRUCT = "struct"
	STRUCT_FIELD = "struct_field"
	ENUM = "enum"
	VARIANT = "variant"
	FUNCTION = "function"
	TRAIT = "trait"
	TRAIT_ALIAS = "trait_alias"
	IMPL = "impl"
	TYPE_ALIAS = "type_alias"
	CONSTANT = "constant"
	STATIC = "static"
	EXTERN_TYPE = "extern_type"
	MACRO = "macro"
	PROC_MACRO = "proc_macro"
	PRIMITIVE = "primitive"
	ASSOC_CONST = "assoc_const"
	ASSOC_TYPE = "assoc_type"
	OTHER = "other"  # Any kind this version does not know

	@classmethod
	def _missing_(cls, value: object) -> ItemKind:
		return cls.OTHER


class Item(BaseModel):
	"""One entry of the crate index."""

	model_config = ConfigDict(frozen=True, extra="ignore")

	id: Id
	crate_id: int = 0
	name: str | None = None
	docs: str | None = None
	attrs: list[Any] = Field(default_factory=list)
	visibility: Any = None
	links: dict[str, Id] = Field(default_factory=dict)
	inner: dict[str, Any]

	@model_validator(mode="before")
	@classmethod
	def _normalise_inner(cls, data: Any) -> Any:
		"""Fold the old ``{"kind": k, "inner": payload}`` layout into ``{"inner": {k: payload}}``."""
		if not isinstance(data, dict):
			return data
		inner = data.get("inner")
		kind = data.get("kind")
		if isinstance(kind, str) and not (isinstance(inner, dict) and len(inner) == 1):
			data = {**data, "inner": {kind: inner}}
		elif isinstance(inner, str):
			# Payload-less kinds may be serialised as a bare tag
			data = {**data, "inner": {inner: None}}
		return data

	@property
	def tag(self) -> str:
		"""The raw kind tag, e.g. ``"function"``."""
		return next(iter(self.inner), "")

	@property
	def kind(self) -> ItemKind:
		return ItemKind(self.tag)

	@property
	def payload(self) -> Any:
		"""The kind-specific payload."""
		return self.inner.get(self.tag)


class ItemSummary(BaseModel):
	"""Entry of the ``paths`` table: where an item lives, including external ones."""

	model_config = ConfigDict(frozen=True, extra="ignore")

	crate_id: int = 0
	path: list[str] = Field(default_factory=list)
	kind: str = ""

	@property
	def qualified_name(self) -> str:
		return "::".join(self.path)


class ExternalCrate(BaseModel):
	model_config = ConfigDict(frozen=True, extra="ignore")

	name: str
	html_root_url: str | None = None


class RustdocCrate(BaseModel):
	"""Top-level rustdoc JSON document."""

	model_config = ConfigDict(frozen=True, extra="ignore")

	root: Id
	crate_version: str | None = None
	includes_private: bool = False
	index: dict[Id, Item] = Field(default_factory=dict)
	paths: dict[Id, ItemSummary] = Field(default_factory=dict)
	external_crates: dict[str, ExternalCrate] = Field(default_factory=dict)
	format_version: int = 0
