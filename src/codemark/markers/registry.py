"""Ordered registry of prefix rules; rejects ambiguous configurations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional

from codemark.runtime.telemetry import MARKERS, Event, record_event, span

from .models import HighlightTag, PrefixRule, PrefixTable


@dataclass(slots=True)
class RegistryStats:
    """Lightweight snapshot describing registry state."""

    rule_count: int
    tags: tuple[str, ...]
    revision: int


class MarkerConflictError(RuntimeError):
    """Raised when a new rule reuses a registered tag or prefix."""

    def __init__(self, rule: PrefixRule, conflicts: Iterable[PrefixRule]):
        conflicts_tuple = tuple(conflicts)
        message = (
            f"Prefix {rule.prefix!r} for '{rule.tag.value}' conflicts with "
            f"{[c.tag.value for c in conflicts_tuple]}"
        )
        super().__init__(message)
        self.rule = rule
        self.conflicts = conflicts_tuple


class MarkerRegistry:
    """Owns the ordered prefix table handed to the matcher.

    Registration order is match order: when one prefix is a leading substring
    of another, the rule registered first wins.
    """

    def __init__(self, *, logger_name: str = MARKERS) -> None:
        self._rules: Dict[HighlightTag, PrefixRule] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_rule(self, tag: HighlightTag | str) -> PrefixRule:
        try:
            return self._rules[HighlightTag(tag)]
        except KeyError as exc:
            raise KeyError(f"No prefix registered for '{tag}'") from exc

    def register_rule(self, rule: PrefixRule, *, replace: bool = False) -> PrefixRule:
        with span(
            "markers::register_rule",
            logger_name=self._logger_name,
            component="markers",
            metadata={"tag": rule.tag.value, "prefix": rule.prefix},
        ) as handle:
            conflicts = self.detect_conflicts(rule)
            if conflicts and not replace:
                handle.add_metadata(
                    "conflicts", ",".join(c.tag.value for c in conflicts)
                )
                raise MarkerConflictError(rule, conflicts)

            for conflict in conflicts:
                if conflict.tag != rule.tag:
                    self._rules.pop(conflict.tag, None)

            # dict assignment keeps the original slot when a tag is replaced
            self._rules[rule.tag] = rule
            self._warn_shadowing(rule)
            self._touch()
            return rule

    def unregister_rule(self, tag: HighlightTag | str) -> Optional[PrefixRule]:
        with span(
            "markers::unregister_rule",
            logger_name=self._logger_name,
            component="markers",
            metadata={"tag": str(tag)},
        ):
            rule = self._rules.pop(HighlightTag(tag), None)
            if rule is not None:
                self._touch()
            return rule

    def update_prefix(self, tag: HighlightTag | str, prefix: str) -> PrefixRule:
        with span(
            "markers::update_prefix",
            logger_name=self._logger_name,
            component="markers",
            metadata={"tag": str(tag), "prefix": prefix},
        ) as handle:
            current = self.get_rule(tag)
            updated = PrefixRule(current.tag, prefix, current.description)
            conflicts = [
                c for c in self.detect_conflicts(updated) if c.tag != current.tag
            ]
            if conflicts:
                handle.add_metadata(
                    "conflicts", ",".join(c.tag.value for c in conflicts)
                )
                raise MarkerConflictError(updated, conflicts)
            self._rules[current.tag] = updated
            self._warn_shadowing(updated)
            self._touch()
            return updated

    def iter_rules(self) -> Iterator[PrefixRule]:
        yield from self._rules.values()

    def table(self) -> PrefixTable:
        return tuple(self._rules.values())

    def stats(self) -> RegistryStats:
        return RegistryStats(
            rule_count=len(self._rules),
            tags=tuple(tag.value for tag in self._rules),
            revision=self._revision,
        )

    def detect_conflicts(self, rule: PrefixRule) -> list[PrefixRule]:
        return [
            existing
            for existing in self._rules.values()
            if existing.tag == rule.tag or existing.prefix == rule.prefix
        ]

    def _warn_shadowing(self, rule: PrefixRule) -> None:
        for existing in self._rules.values():
            if existing.tag == rule.tag:
                continue
            if existing.shadows(rule) or rule.shadows(existing):
                record_event(
                    Event.SHADOWED_PREFIX,
                    level="warning",
                    logger_name=self._logger_name,
                    tag=rule.tag.value,
                    other=existing.tag.value,
                )

    def _touch(self) -> None:
        self._revision += 1


__all__ = [
    "MarkerRegistry",
    "MarkerConflictError",
    "RegistryStats",
]
