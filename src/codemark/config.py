"""Engine settings snapshots: enable flag, per-tag colors and prefix table."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from codemark.markers import DEFAULT_RULES, HighlightTag, PrefixMatcher, PrefixTable
from codemark.runtime.telemetry import Event, record_event

_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")
_FLAG_WORDS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}


class ConfigurationError(ValueError):
    """Raised when a settings snapshot cannot be used by the engine."""


def _parse_opacity(value: Any) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"Opacity must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Opacity must be a number, got {value!r}") from exc


def _parse_flag(key: str, value: Any) -> bool:
    """Accept real booleans and the usual true/false words."""

    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _FLAG_WORDS:
        return _FLAG_WORDS[value.strip().lower()]
    raise ConfigurationError(f"{key!r} must be a boolean, got {value!r}")


@dataclass(frozen=True, slots=True)
class ColorSpec:
    """Stored color: ``#rrggbb`` plus an opacity in ``[0, 1]``."""

    color: str
    opacity: float = 1.0

    def __post_init__(self) -> None:
        found = _HEX_COLOR.match(self.color.strip())
        if found is None:
            raise ConfigurationError(f"Invalid hex color {self.color!r}")
        opacity = _parse_opacity(self.opacity)
        if not 0.0 <= opacity <= 1.0:
            raise ConfigurationError(f"Opacity {opacity!r} must lie between 0 and 1")
        object.__setattr__(self, "color", f"#{found.group(1).lower()}")
        object.__setattr__(self, "opacity", opacity)

    @property
    def rgb(self) -> tuple[int, int, int]:
        digits = self.color[1:]
        return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


ColorConfig = Mapping[HighlightTag, ColorSpec]

DEFAULT_COLORS: ColorConfig = MappingProxyType(
    {
        HighlightTag.HIGHLIGHT: ColorSpec("#4d4d4d", 0.5),
        HighlightTag.DIFF_ADD: ColorSpec("#2ea043", 0.3),
        HighlightTag.DIFF_REMOVE: ColorSpec("#f85149", 0.3),
    }
)

# flat keys used by persisted plugin data -> (tag, attribute)
_FLAT_KEYS: Mapping[str, tuple[HighlightTag, str]] = {
    "backgroundColor": (HighlightTag.HIGHLIGHT, "color"),
    "opacity": (HighlightTag.HIGHLIGHT, "opacity"),
    "diffAddColor": (HighlightTag.DIFF_ADD, "color"),
    "diffAddOpacity": (HighlightTag.DIFF_ADD, "opacity"),
    "diffRemoveColor": (HighlightTag.DIFF_REMOVE, "color"),
    "diffRemoveOpacity": (HighlightTag.DIFF_REMOVE, "opacity"),
}
_IGNORED_KEYS = frozenset({"showPrefixInReadingMode", "codeBlockBg"})


def _freeze_colors(colors: Mapping[Any, ColorSpec]) -> ColorConfig:
    return MappingProxyType({HighlightTag(tag): spec for tag, spec in colors.items()})


@dataclass(frozen=True)
class EngineSettings:
    """Read-only configuration snapshot consumed once per engine event."""

    enabled: bool = True
    colors: ColorConfig = field(default_factory=lambda: DEFAULT_COLORS)
    prefixes: PrefixTable = DEFAULT_RULES

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", _freeze_colors(self.colors))
        object.__setattr__(self, "prefixes", tuple(self.prefixes))
        self.validate()

    def validate(self) -> None:
        seen_prefixes: set[str] = set()
        seen_tags: set[HighlightTag] = set()
        for rule in self.prefixes:
            if rule.prefix in seen_prefixes:
                raise ConfigurationError(f"Duplicate prefix {rule.prefix!r}")
            if rule.tag in seen_tags:
                raise ConfigurationError(f"Duplicate tag '{rule.tag.value}'")
            if rule.tag not in self.colors:
                raise ConfigurationError(f"No color configured for '{rule.tag.value}'")
            seen_prefixes.add(rule.prefix)
            seen_tags.add(rule.tag)

    def __hash__(self) -> int:
        # colors is a read-only mapping; hash its items in tag order
        colors = tuple(sorted((tag.value, spec) for tag, spec in self.colors.items()))
        return hash((self.enabled, colors, self.prefixes))

    @classmethod
    def default(cls) -> "EngineSettings":
        return cls()

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], *, base: Optional["EngineSettings"] = None
    ) -> "EngineSettings":
        """Overlay flat persisted settings (``backgroundColor`` etc.) on ``base``."""

        base = base or cls.default()
        colors = {tag: spec for tag, spec in base.colors.items()}
        enabled = base.enabled
        for key, value in data.items():
            if key == "enabled":
                enabled = _parse_flag(key, value)
            elif key in _FLAT_KEYS:
                tag, attribute = _FLAT_KEYS[key]
                current = colors[tag]
                if attribute == "color":
                    colors[tag] = ColorSpec(str(value), current.opacity)
                else:
                    colors[tag] = ColorSpec(current.color, value)
            elif key not in _IGNORED_KEYS:
                record_event(Event.UNKNOWN_KEY, level="warning", key=key)
        return cls(enabled=enabled, colors=colors, prefixes=base.prefixes)

    def with_overrides(self, **changes: Any) -> "EngineSettings":
        return replace(self, **changes)

    def with_color(self, tag: HighlightTag | str, spec: ColorSpec) -> "EngineSettings":
        colors = dict(self.colors)
        colors[HighlightTag(tag)] = spec
        return replace(self, colors=colors)

    def matcher(self) -> PrefixMatcher:
        return PrefixMatcher(self.prefixes)


__all__ = [
    "ColorConfig",
    "ColorSpec",
    "ConfigurationError",
    "DEFAULT_COLORS",
    "EngineSettings",
]
