"""crate-inspector - browse Rust crates through rustdoc JSON and render their types."""

from __future__ import annotations

from crate_inspector.builder import BuildOptions, CrateBuilder
from crate_inspector.errors import (
	BuildError,
	CrateInspectorError,
	CrateLoadError,
	DecodeError,
	MissingNameError,
	RenderDepthError,
	RenderError,
	UnknownDialectError,
	UnknownReferenceError,
	UnsupportedNodeKindError,
)
from crate_inspector.krate import Crate, ItemKind
from crate_inspector.render import ALTERNATE, NATIVE, Dialect, get_dialect, render

__version__ = "0.1.0"
__author__ = "crate-inspector contributors"

__all__ = [
	"ALTERNATE",
	"NATIVE",
	"BuildError",
	"BuildOptions",
	"Crate",
	"CrateBuilder",
	"CrateInspectorError",
	"CrateLoadError",
	"DecodeError",
	"Dialect",
	"ItemKind",
	"MissingNameError",
	"RenderDepthError",
	"RenderError",
	"UnknownDialectError",
	"UnknownReferenceError",
	"UnsupportedNodeKindError",
	"__version__",
	"get_dialect",
	"render",
]
