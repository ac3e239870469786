"""Editing verbs that rewrite marker prefixes."""

from .toggle import LineEdit, strip_prefix, toggle_prefix

__all__ = ["LineEdit", "strip_prefix", "toggle_prefix"]
