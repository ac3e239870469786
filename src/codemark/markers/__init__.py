"""Prefix markers: tags, the ordered prefix registry and the matcher."""

from .models import HighlightTag, PrefixMatch, PrefixRule, PrefixTable
from .registry import MarkerConflictError, MarkerRegistry, RegistryStats
from .matcher import PrefixMatcher, match_prefix
from .defaults import DEFAULT_RULES, default_registry, load_default_markers

__all__ = [
    "HighlightTag",
    "PrefixMatch",
    "PrefixRule",
    "PrefixTable",
    "MarkerRegistry",
    "MarkerConflictError",
    "RegistryStats",
    "PrefixMatcher",
    "match_prefix",
    "DEFAULT_RULES",
    "default_registry",
    "load_default_markers",
]
