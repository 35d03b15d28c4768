"""Item graph over rustdoc JSON output."""

from .crate import Crate
from .items import (
	VIEW_TYPES,
	ConstantItem,
	CrateItem,
	Discriminant,
	EnumItem,
	FieldItem,
	FunctionItem,
	ImplItem,
	MacroItem,
	ModuleItem,
	StaticItem,
	StructItem,
	TraitItem,
	VariantItem,
)
from .schema import ExternalCrate, Item, ItemKind, ItemSummary, RustdocCrate

__all__ = [
	"VIEW_TYPES",
	"ConstantItem",
	"Crate",
	"CrateItem",
	"Discriminant",
	"EnumItem",
	"ExternalCrate",
	"FieldItem",
	"FunctionItem",
	"ImplItem",
	"Item",
	"ItemKind",
	"ItemSummary",
	"MacroItem",
	"ModuleItem",
	"RustdocCrate",
	"StaticItem",
	"StructItem",
	"TraitItem",
	"VariantItem",
]
