"""Utility modules for crate-inspector."""
