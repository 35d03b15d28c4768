"""Type-expression model and its rustdoc JSON decoder."""

from .decode import (
	decode_bound,
	decode_generic_arg,
	decode_generic_args,
	decode_generic_param,
	decode_path,
	decode_poly_trait,
	decode_signature,
	decode_type,
)
from .model import (
	UNIT,
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

__all__ = [
	"UNIT",
	"AngleBracketed",
	"Array",
	"AssocItemConstraint",
	"BorrowedRef",
	"ConstArg",
	"ConstParam",
	"DynTrait",
	"FunctionPointer",
	"FunctionSignature",
	"Generic",
	"GenericArg",
	"GenericArgs",
	"GenericBound",
	"GenericParamDef",
	"GenericParamDefKind",
	"ImplTrait",
	"Infer",
	"InferArg",
	"LifetimeArg",
	"LifetimeParam",
	"Outlives",
	"Parenthesized",
	"Pat",
	"Path",
	"PolyTrait",
	"Primitive",
	"QualifiedPath",
	"RawPointer",
	"ResolvedPath",
	"ReturnTypeNotation",
	"Slice",
	"TraitBound",
	"TraitBoundModifier",
	"Tuple",
	"Type",
	"TypeArg",
	"TypeParam",
	"Use",
	# Decoders
	"decode_bound",
	"decode_generic_arg",
	"decode_generic_args",
	"decode_generic_param",
	"decode_path",
	"decode_poly_trait",
	"decode_signature",
	"decode_type",
]
