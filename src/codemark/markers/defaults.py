"""Built-in prefix markers matching the classic ``>>>`` conventions."""

from __future__ import annotations

from .models import HighlightTag, PrefixRule, PrefixTable
from codemark.runtime.telemetry import MARKERS

from .registry import MarkerRegistry

DEFAULT_RULES: PrefixTable = (
    PrefixRule(HighlightTag.HIGHLIGHT, ">>>> ", description="General highlight"),
    PrefixRule(HighlightTag.DIFF_ADD, ">>>+ ", description="Diff addition"),
    PrefixRule(HighlightTag.DIFF_REMOVE, ">>>- ", description="Diff removal"),
)


def load_default_markers(
    registry: MarkerRegistry, *, replace: bool = False
) -> MarkerRegistry:
    """Populate ``registry`` with ``DEFAULT_RULES`` in their canonical order."""

    for rule in DEFAULT_RULES:
        registry.register_rule(rule, replace=replace)
    return registry


def default_registry(*, logger_name: str = MARKERS) -> MarkerRegistry:
    return load_default_markers(MarkerRegistry(logger_name=logger_name))


__all__ = ["DEFAULT_RULES", "load_default_markers", "default_registry"]
