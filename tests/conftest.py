"""Global test fixtures and configuration."""

from __future__ import annotations

import copy
import json
import os
from typing import TYPE_CHECKING, Any

import pytest

from crate_inspector.krate import Crate

if TYPE_CHECKING:
	from pathlib import Path


def _prim(name: str) -> dict[str, Any]:
	return {"primitive": name}


def _ref(inner: dict[str, Any], lifetime: str | None = None, is_mutable: bool = False) -> dict[str, Any]:
	return {"borrowed_ref": {"lifetime": lifetime, "is_mutable": is_mutable, "type": inner}}


def _resolved(name: str, item_id: int | None = None, args: dict[str, Any] | None = None) -> dict[str, Any]:
	return {"resolved_path": {"path": name, "id": item_id, "args": args}}


def _trait_bound(name: str, item_id: int, args: dict[str, Any] | None = None) -> dict[str, Any]:
	return {
		"trait_bound": {
			"trait": {"path": name, "id": item_id, "args": args},
			"generic_params": [],
			"modifier": "none",
		}
	}


NO_GENERICS: dict[str, Any] = {"params": [], "where_predicates": []}


def _item(item_id: int, name: str | None, inner: dict[str, Any], crate_id: int = 0) -> dict[str, Any]:
	return {
		"id": item_id,
		"crate_id": crate_id,
		"name": name,
		"span": None,
		"visibility": "public",
		"docs": f"Docs for {name}." if name else None,
		"links": {},
		"attrs": [],
		"deprecation": None,
		"inner": inner,
	}


def _function(
	item_id: int,
	name: str,
	inputs: list[list[Any]],
	output: dict[str, Any] | None,
	generics: dict[str, Any] | None = None,
	has_body: bool = True,
) -> dict[str, Any]:
	return _item(
		item_id,
		name,
		{
			"function": {
				"sig": {"inputs": inputs, "output": output, "is_c_variadic": False},
				"generics": generics or NO_GENERICS,
				"header": {"is_const": False, "is_unsafe": False, "is_async": False, "abi": "Rust"},
				"has_body": has_body,
			}
		},
	)


def build_rustdoc_document() -> dict[str, Any]:
	"""
	A small ``geometry`` crate in the integer-id rustdoc JSON layout.

	Root module (0) lists: distance (1), Point (2), ORIGIN_NAME (3), COUNTER (6),
	Shape (8), Area (10), util (11), point! (12), log (14), print_all (15).
	Point has an inherent impl (7) with ``new`` (9); util holds ``apply`` (19);
	20 is the external ``core::fmt::Display`` trait.

	"""
	point = _resolved("Point", 2)
	fn_i32 = {"parenthesized": {"inputs": [_prim("i32")], "output": _prim("i32")}}
	index = [
		_item(
			0,
			"geometry",
			{"module": {"is_crate": True, "items": [1, 2, 3, 6, 8, 10, 11, 12, 14, 15], "is_stripped": False}},
		),
		_function(1, "distance", [["a", _ref(point)], ["b", _ref(point)]], _prim("f64")),
		_item(
			2,
			"Point",
			{
				"struct": {
					"kind": {"plain": {"fields": [4, 5], "has_stripped_fields": False}},
					"generics": NO_GENERICS,
					"impls": [7],
				}
			},
		),
		_item(
			3,
			"ORIGIN_NAME",
			{
				"constant": {
					"type": _ref(_prim("str"), lifetime="'static"),
					"const": {"expr": '"origin"', "value": None, "is_literal": True},
				}
			},
		),
		_item(4, "x", {"struct_field": _prim("f64")}),
		_item(5, "y", {"struct_field": _prim("f64")}),
		_item(6, "COUNTER", {"static": {"type": _prim("usize"), "is_mutable": True, "expr": "0", "is_unsafe": False}}),
		_item(
			7,
			None,
			{
				"impl": {
					"is_unsafe": False,
					"generics": NO_GENERICS,
					"provided_trait_methods": [],
					"trait": None,
					"for": point,
					"items": [9],
					"is_negative": False,
					"is_synthetic": False,
					"blanket_impl": None,
				}
			},
		),
		_item(
			8,
			"Shape",
			{
				"enum": {
					"generics": {
						"params": [
							{"name": "T", "kind": {"type": {"bounds": [], "default": None, "is_synthetic": False}}}
						],
						"where_predicates": [],
					},
					"has_stripped_variants": False,
					"variants": [13, 16],
					"impls": [],
				}
			},
		),
		_function(9, "new", [["x", _prim("f64")], ["y", _prim("f64")]], {"generic": "Self"}),
		_item(
			10,
			"Area",
			{
				"trait": {
					"is_auto": False,
					"is_unsafe": False,
					"is_dyn_compatible": True,
					"items": [18],
					"generics": NO_GENERICS,
					"bounds": [],
					"implementations": [],
				}
			},
		),
		_item(11, "util", {"module": {"is_crate": False, "items": [19], "is_stripped": False}}),
		_item(12, "point", {"macro": "macro_rules! point {\n    ($x:expr, $y:expr) => { ... };\n}"}),
		_item(13, "Circle", {"variant": {"kind": {"tuple": [17]}, "discriminant": None}}),
		_function(14, "log", [["msg", _ref(_prim("str"))]], None),
		_function(
			15,
			"print_all",
			[["value", {"impl_trait": [_trait_bound("Display", 20)]}]],
			None,
			generics={
				"params": [
					{
						"name": "impl Display",
						"kind": {"type": {"bounds": [_trait_bound("Display", 20)], "default": None, "is_synthetic": True}},
					}
				],
				"where_predicates": [],
			},
		),
		_item(16, "Empty", {"variant": {"kind": "plain", "discriminant": {"expr": "3", "value": "3"}}}),
		_item(17, "0", {"struct_field": {"generic": "T"}}),
		_function(18, "area", [["self", _ref({"generic": "Self"})]], _prim("f64"), has_body=False),
		_function(
			19,
			"apply",
			[["f", {"generic": "F"}], ["x", _prim("i32")]],
			_prim("i32"),
			generics={
				"params": [
					{
						"name": "F",
						"kind": {
							"type": {"bounds": [_trait_bound("Fn", 30, fn_i32)], "default": None, "is_synthetic": False}
						},
					}
				],
				"where_predicates": [],
			},
		),
		_item(
			20,
			"Display",
			{
				"trait": {
					"is_auto": False,
					"is_unsafe": False,
					"is_dyn_compatible": True,
					"items": [],
					"generics": NO_GENERICS,
					"bounds": [],
					"implementations": [],
				}
			},
			crate_id=1,
		),
	]
	return {
		"root": 0,
		"crate_version": "0.1.0",
		"includes_private": False,
		"index": {str(item["id"]): item for item in index},
		"paths": {
			"0": {"crate_id": 0, "path": ["geometry"], "kind": "module"},
			"2": {"crate_id": 0, "path": ["geometry", "Point"], "kind": "struct"},
			"19": {"crate_id": 0, "path": ["geometry", "util", "apply"], "kind": "function"},
			"20": {"crate_id": 1, "path": ["core", "fmt", "Display"], "kind": "trait"},
		},
		"external_crates": {"1": {"name": "core", "html_root_url": None}},
		"target": {"triple": "x86_64-unknown-linux-gnu", "target_features": []},
		"format_version": 39,
	}


@pytest.fixture
def rustdoc_document() -> dict[str, Any]:
	"""A fresh copy of the ``geometry`` rustdoc JSON document."""
	return copy.deepcopy(build_rustdoc_document())


@pytest.fixture
def krate(rustdoc_document: dict[str, Any]) -> Crate:
	"""The ``geometry`` crate loaded as an item graph."""
	return Crate.from_dict(rustdoc_document)


@pytest.fixture
def rustdoc_json_file(tmp_path: Path, rustdoc_document: dict[str, Any]) -> Path:
	"""The ``geometry`` document written to disk."""
	path = tmp_path / "geometry.json"
	path.write_text(json.dumps(rustdoc_document), encoding="utf-8")
	return path


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
	"""Run in an empty directory with no crate-inspector environment overrides."""
	work_dir = tmp_path / "work"
	work_dir.mkdir()
	monkeypatch.chdir(work_dir)
	monkeypatch.setattr("crate_inspector.utils.config_loader.xdg_config_home", str(tmp_path / "xdg"))
	for name in [n for n in os.environ if n.startswith("CRATE_INSPECTOR_")]:
		monkeypatch.delenv(name)
	return work_dir
