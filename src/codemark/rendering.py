"""Turns abstract decorations into concrete colors and Rich text."""

from __future__ import annotations

from typing import Iterable, Sequence

from rich.style import Style
from rich.text import Text

from codemark.config import ColorSpec
from codemark.document import HostDocument, Viewport
from codemark.engine import Decoration, HiddenRange, LineBackground

DEFAULT_BASE = "#1e1e1e"


def to_rgba(spec: ColorSpec) -> str:
    """CSS color string, e.g. ``rgba(77, 77, 77, 0.5)``."""

    r, g, b = spec.rgb
    return f"rgba({r}, {g}, {b}, {spec.opacity:g})"


def blend(spec: ColorSpec, base: str = DEFAULT_BASE) -> str:
    """Flatten ``spec`` onto an opaque ``base`` color for terminals."""

    backdrop = ColorSpec(base).rgb
    alpha = spec.opacity
    mixed = (
        round(channel * alpha + under * (1.0 - alpha))
        for channel, under in zip(spec.rgb, backdrop)
    )
    return "#" + "".join(f"{value:02x}" for value in mixed)


def line_style(spec: ColorSpec, *, base: str = DEFAULT_BASE) -> Style:
    return Style(bgcolor=blend(spec, base))


def _hidden_ranges(decorations: Iterable[Decoration]) -> list[tuple[int, int]]:
    return sorted(
        (item.start, item.end) for item in decorations if isinstance(item, HiddenRange)
    )


def render_visible(
    document: HostDocument,
    decorations: Sequence[Decoration],
    viewport: Viewport,
    *,
    base: str = DEFAULT_BASE,
) -> Text:
    """Render the lines touching ``viewport`` with decorations applied."""

    backgrounds = {
        item.line: item for item in decorations if isinstance(item, LineBackground)
    }
    hidden = _hidden_ranges(decorations)

    first = document.line_at(viewport.start).index
    last = document.line_at(viewport.end).index
    output = Text(no_wrap=True)
    for index in range(first, last + 1):
        line = document.line(index)
        visible = _elide(line.text, line.start, hidden)
        background = backgrounds.get(index)
        if background is not None:
            output.append(visible, style=line_style(background.color, base=base))
        else:
            output.append(visible)
        if index != last:
            output.append("\n")
    return output


def _elide(text: str, start: int, hidden: list[tuple[int, int]]) -> str:
    end = start + len(text)
    pieces: list[str] = []
    cursor = start
    for lo, hi in hidden:
        if hi <= start or lo >= end:
            continue
        lo, hi = max(lo, start), min(hi, end)
        pieces.append(text[cursor - start : lo - start])
        cursor = max(cursor, hi)
    pieces.append(text[cursor - start :])
    return "".join(pieces)


__all__ = ["DEFAULT_BASE", "blend", "line_style", "render_visible", "to_rgba"]
