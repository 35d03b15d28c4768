"""Dialect-driven rendering of type expressions to text."""

from .dialect import (
	ALTERNATE,
	BUILTIN_DIALECTS,
	NATIVE,
	Dialect,
	QualifiedPathStyle,
	RefStyle,
	available_dialects,
	build_dialect,
	get_dialect,
	load_dialects,
)
from .renderer import (
	DEFAULT_MAX_DEPTH,
	render,
	render_bound,
	render_generic_arg,
	render_generic_args,
	render_generic_param,
	render_path,
	render_poly_trait,
	render_signature,
	render_type,
)

__all__ = [
	"ALTERNATE",
	"BUILTIN_DIALECTS",
	"DEFAULT_MAX_DEPTH",
	"NATIVE",
	"Dialect",
	"QualifiedPathStyle",
	"RefStyle",
	"available_dialects",
	"build_dialect",
	"get_dialect",
	"load_dialects",
	"render",
	"render_bound",
	"render_generic_arg",
	"render_generic_args",
	"render_generic_param",
	"render_path",
	"render_poly_trait",
	"render_signature",
	"render_type",
]
