"""Exception hierarchy for crate-inspector."""

from __future__ import annotations

from typing import Any


class CrateInspectorError(Exception):
	"""Base class for all crate-inspector errors."""


class RenderError(CrateInspectorError):
	"""A type expression could not be rendered."""


class UnsupportedNodeKindError(RenderError):
	"""A node kind outside the renderable set was encountered."""

	def __init__(self, kind: str, node: Any = None) -> None:
		self.kind = kind
		self.node = node
		super().__init__(f"Unsupported node kind: {kind}")


class RenderDepthError(RenderError):
	"""A type expression nests deeper than the configured limit."""

	def __init__(self, max_depth: int) -> None:
		self.max_depth = max_depth
		super().__init__(f"Type expression exceeds maximum nesting depth of {max_depth}")


class MissingNameError(CrateInspectorError):
	"""An item that must carry a name has none."""

	def __init__(self, item_id: str) -> None:
		self.item_id = item_id
		super().__init__(f"Item {item_id} has no name")


class UnknownReferenceError(CrateInspectorError):
	"""An id does not resolve to an entry of the expected kind in the item index."""

	def __init__(self, item_id: str, detail: str | None = None) -> None:
		self.item_id = item_id
		message = f"Unknown item reference: {item_id}"
		if detail:
			message = f"{message} ({detail})"
		super().__init__(message)


class UnknownDialectError(CrateInspectorError):
	"""No dialect is registered under the requested name."""

	def __init__(self, name: str, available: list[str] | None = None) -> None:
		self.name = name
		message = f"Unknown dialect: {name}"
		if available:
			message = f"{message} (available: {', '.join(available)})"
		super().__init__(message)


class DecodeError(CrateInspectorError):
	"""A rustdoc JSON fragment does not match the type-expression schema."""


class CrateLoadError(CrateInspectorError):
	"""A rustdoc JSON document could not be read or validated."""


class BuildError(CrateInspectorError):
	"""Running cargo to produce rustdoc JSON failed."""
