"""Tests for decoding rustdoc JSON fragments into type expressions."""

from __future__ import annotations

import pytest

from crate_inspector.errors import DecodeError
from crate_inspector.render import render
from crate_inspector.types import (
	AngleBracketed,
	Array,
	BorrowedRef,
	ConstArg,
	ConstParam,
	DynTrait,
	FunctionPointer,
	Generic,
	ImplTrait,
	Infer,
	LifetimeArg,
	LifetimeParam,
	Outlives,
	Parenthesized,
	Primitive,
	QualifiedPath,
	RawPointer,
	ResolvedPath,
	ReturnTypeNotation,
	Slice,
	TraitBound,
	Tuple,
	TypeArg,
	TypeParam,
	decode_bound,
	decode_generic_arg,
	decode_generic_args,
	decode_generic_param,
	decode_path,
	decode_signature,
	decode_type,
)
from crate_inspector.types.model import TraitBoundModifier


@pytest.mark.unit
class TestDecodeTypes:
	"""Externally tagged ``Type`` values."""

	def test_primitive(self) -> None:
		assert decode_type({"primitive": "u8"}) == Primitive("u8")

	def test_payload_less_variant_as_bare_string(self) -> None:
		assert decode_type("infer") == Infer()

	def test_resolved_path_with_args(self) -> None:
		data = {
			"resolved_path": {
				"path": "Vec",
				"id": 12,
				"args": {"angle_bracketed": {"args": [{"type": {"primitive": "u8"}}], "constraints": []}},
			}
		}
		node = decode_type(data)
		assert isinstance(node, ResolvedPath)
		assert node.path.id == "12"
		assert node.path.args == AngleBracketed((TypeArg(Primitive("u8")),))

	def test_old_path_name_key(self) -> None:
		"""Older formats call the path ``name`` and use string ids."""
		path = decode_path({"name": "Option", "id": "0:12:345", "args": None})
		assert path.path == "Option"
		assert path.id == "0:12:345"
		assert path.args is None

	def test_borrowed_ref_and_old_mutable_key(self) -> None:
		new = decode_type({"borrowed_ref": {"lifetime": "'a", "is_mutable": True, "type": {"generic": "T"}}})
		old = decode_type({"borrowed_ref": {"lifetime": "'a", "mutable": True, "type": {"generic": "T"}}})
		assert new == old == BorrowedRef(Generic("T"), is_mutable=True, lifetime="'a")

	def test_raw_pointer(self) -> None:
		node = decode_type({"raw_pointer": {"is_mutable": False, "type": {"primitive": "u8"}}})
		assert node == RawPointer(Primitive("u8"))

	def test_slice_array_tuple(self) -> None:
		assert decode_type({"slice": {"primitive": "u8"}}) == Slice(Primitive("u8"))
		assert decode_type({"array": {"type": {"primitive": "u8"}, "len": "4"}}) == Array(Primitive("u8"), "4")
		assert decode_type({"tuple": []}) == Tuple(())
		assert decode_type({"tuple": [{"generic": "A"}, {"generic": "B"}]}) == Tuple((Generic("A"), Generic("B")))

	def test_dyn_trait(self) -> None:
		data = {
			"dyn_trait": {
				"traits": [
					{"trait": {"path": "Send", "id": 1, "args": None}, "generic_params": []},
					{"trait": {"path": "Sync", "id": 2, "args": None}, "generic_params": []},
				],
				"lifetime": None,
			}
		}
		node = decode_type(data)
		assert isinstance(node, DynTrait)
		assert [t.trait.path for t in node.traits] == ["Send", "Sync"]
		assert render(node) == "dyn Send + Sync"

	def test_impl_trait(self) -> None:
		data = {
			"impl_trait": [
				{"trait_bound": {"trait": {"path": "Iterator", "id": 3, "args": None}, "generic_params": [], "modifier": "none"}},
				{"outlives": "'a"},
			]
		}
		node = decode_type(data)
		assert isinstance(node, ImplTrait)
		assert isinstance(node.bounds[0], TraitBound)
		assert node.bounds[1] == Outlives("'a")

	def test_function_pointer_old_decl_key(self) -> None:
		data = {
			"function_pointer": {
				"decl": {"inputs": [["x", {"primitive": "i32"}]], "output": None, "c_variadic": False},
				"generic_params": [],
				"header": {},
			}
		}
		node = decode_type(data)
		assert isinstance(node, FunctionPointer)
		assert node.signature.inputs == (("x", Primitive("i32")),)
		assert node.signature.output is None

	def test_qualified_path(self) -> None:
		data = {
			"qualified_path": {
				"name": "Item",
				"args": {"angle_bracketed": {"args": [], "constraints": []}},
				"self_type": {"generic": "I"},
				"trait": {"path": "Iterator", "id": 4, "args": None},
			}
		}
		node = decode_type(data)
		assert isinstance(node, QualifiedPath)
		assert node.trait is not None
		assert node.trait.path == "Iterator"
		assert render(node) == "<I as Iterator>::Item"

	def test_qualified_path_without_trait(self) -> None:
		data = {"qualified_path": {"name": "Target", "args": None, "self_type": {"generic": "Self"}, "trait": None}}
		node = decode_type(data)
		assert isinstance(node, QualifiedPath)
		assert node.trait is None

	def test_kind_inner_layout(self) -> None:
		"""The oldest formats wrap every enum as ``{"kind": ..., "inner": ...}``."""
		data = {"kind": "borrowed_ref", "inner": {"lifetime": None, "mutable": False, "type": {"kind": "primitive", "inner": "str"}}}
		assert decode_type(data) == BorrowedRef(Primitive("str"))

	def test_unknown_tag(self) -> None:
		with pytest.raises(DecodeError, match="Unknown type kind"):
			decode_type({"quantum_type": {}})

	def test_malformed_value(self) -> None:
		with pytest.raises(DecodeError, match="Malformed type"):
			decode_type(42)
		with pytest.raises(DecodeError, match="missing field"):
			decode_type({"array": {"type": {"primitive": "u8"}}})

	def test_moderate_nesting_decodes(self) -> None:
		data: dict = {"primitive": "u8"}
		for _ in range(200):
			data = {"slice": data}
		node = decode_type(data)
		for _ in range(200):
			assert isinstance(node, Slice)
			node = node.type
		assert node == Primitive("u8")

	@pytest.mark.parametrize("depth", [600, 5000])
	def test_excessive_nesting_is_a_decode_error(self, depth: int) -> None:
		"""Input deeper than the interpreter stack fails with a typed error, not a RecursionError."""
		data: dict = {"primitive": "u8"}
		for _ in range(depth):
			data = {"borrowed_ref": {"lifetime": None, "is_mutable": False, "type": data}}
		with pytest.raises(DecodeError, match="nests too deeply"):
			decode_type(data)
		assert decode_type({"primitive": "u8"}) == Primitive("u8")


@pytest.mark.unit
class TestDecodeGenerics:
	"""Generic arguments, bounds and parameters."""

	def test_generic_arg_kinds(self) -> None:
		assert decode_generic_arg({"lifetime": "'a"}) == LifetimeArg("'a")
		assert decode_generic_arg({"type": {"generic": "T"}}) == TypeArg(Generic("T"))
		const = decode_generic_arg({"const": {"expr": "N", "value": None, "is_literal": False}})
		assert const == ConstArg("N", None, is_literal=False)

	def test_parenthesized_args(self) -> None:
		args = decode_generic_args({"parenthesized": {"inputs": [{"primitive": "i32"}], "output": None}})
		assert args == Parenthesized(inputs=(Primitive("i32"),))

	def test_return_type_notation(self) -> None:
		assert decode_generic_args("return_type_notation") == ReturnTypeNotation()

	def test_constraints_and_old_bindings_key(self) -> None:
		constraint = {
			"name": "Item",
			"args": None,
			"binding": {"equality": {"type": {"primitive": "u8"}}},
		}
		new = decode_generic_args({"angle_bracketed": {"args": [], "constraints": [constraint]}})
		old = decode_generic_args({"angle_bracketed": {"args": [], "bindings": [constraint]}})
		assert new == old
		assert isinstance(new, AngleBracketed)
		assert new.constraints[0].name == "Item"
		assert new.constraints[0].equality == Primitive("u8")

	def test_trait_bound_modifier(self) -> None:
		bound = decode_bound(
			{"trait_bound": {"trait": {"path": "Sized", "id": 5, "args": None}, "generic_params": [], "modifier": "maybe"}}
		)
		assert isinstance(bound, TraitBound)
		assert bound.modifier is TraitBoundModifier.MAYBE

	def test_unknown_modifier(self) -> None:
		with pytest.raises(DecodeError, match="modifier"):
			decode_bound({"trait_bound": {"trait": {"path": "Sized", "args": None}, "modifier": "sometimes"}})

	def test_generic_params(self) -> None:
		lifetime = decode_generic_param({"name": "'a", "kind": {"lifetime": {"outlives": ["'b"]}}})
		assert lifetime.kind == LifetimeParam(("'b",))

		type_param = decode_generic_param(
			{"name": "T", "kind": {"type": {"bounds": [], "default": {"primitive": "u8"}, "synthetic": True}}}
		)
		assert type_param.kind == TypeParam(default=Primitive("u8"), is_synthetic=True)

		const_param = decode_generic_param(
			{"name": "N", "kind": {"const": {"type": {"primitive": "usize"}, "default": None}}}
		)
		assert const_param.kind == ConstParam(type=Primitive("usize"))

	def test_signature_inputs_must_be_pairs(self) -> None:
		with pytest.raises(DecodeError, match="signature input"):
			decode_signature({"inputs": [["x"]], "output": None})
