"""Literal prefix matching against an ordered prefix table."""

from __future__ import annotations

from typing import Optional, Tuple

from .models import PrefixMatch, PrefixRule, PrefixTable
from .registry import MarkerRegistry


def match_prefix(line_text: str, table: PrefixTable) -> Optional[PrefixMatch]:
    """Return the first rule whose prefix starts ``line_text``."""

    for rule in table:
        if line_text.startswith(rule.prefix):
            return PrefixMatch(tag=rule.tag, length=len(rule.prefix))
    return None


class PrefixMatcher:
    """Matches line text against a prefix table snapshot."""

    def __init__(self, table: PrefixTable) -> None:
        self._table: Tuple[PrefixRule, ...] = tuple(table)

    @classmethod
    def from_registry(cls, registry: MarkerRegistry) -> "PrefixMatcher":
        return cls(registry.table())

    @property
    def table(self) -> PrefixTable:
        return self._table

    def match(self, line_text: str) -> Optional[PrefixMatch]:
        return match_prefix(line_text, self._table)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrefixMatcher):
            return NotImplemented
        return self._table == other._table

    def __hash__(self) -> int:
        return hash(self._table)

    def __repr__(self) -> str:
        prefixes = ", ".join(repr(rule.prefix) for rule in self._table)
        return f"PrefixMatcher([{prefixes}])"


__all__ = ["PrefixMatcher", "match_prefix"]
