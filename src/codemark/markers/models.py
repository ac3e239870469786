"""Dataclasses describing highlight tags and their literal line prefixes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class HighlightTag(str, Enum):
    """Semantic category selected by a line's prefix marker."""

    HIGHLIGHT = "highlight"
    DIFF_ADD = "diff-add"
    DIFF_REMOVE = "diff-remove"


@dataclass(frozen=True, slots=True)
class PrefixRule:
    """Associates one tag with the literal string that marks a line."""

    tag: HighlightTag
    prefix: str
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag", HighlightTag(self.tag))
        if not self.prefix:
            raise ValueError(f"prefix for '{self.tag.value}' cannot be empty")

    def shadows(self, other: "PrefixRule") -> bool:
        """True when a line carrying ``other.prefix`` would match this rule."""

        return other.prefix.startswith(self.prefix)


@dataclass(frozen=True, slots=True)
class PrefixMatch:
    tag: HighlightTag
    length: int


PrefixTable = tuple[PrefixRule, ...]


__all__ = [
    "HighlightTag",
    "PrefixRule",
    "PrefixMatch",
    "PrefixTable",
]
