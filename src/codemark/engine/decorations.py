"""Viewport-scoped decoration composition."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from codemark.config import ColorConfig, ColorSpec
from codemark.document import HostDocument, Viewport, ensure_offset, ensure_viewport
from codemark.markers import HighlightTag, PrefixMatcher
from codemark.runtime.telemetry import ENGINE, span

from .cache import AnnotationCache, same_block


@dataclass(frozen=True, slots=True)
class LineBackground:
    """Paint the whole of ``line`` with the tag's color."""

    line: int
    start: int
    end: int
    tag: HighlightTag
    color: ColorSpec


@dataclass(frozen=True, slots=True)
class HiddenRange:
    """Elide ``[start, end)`` from display; the text stays in the document."""

    start: int
    end: int
    tag: HighlightTag

    @property
    def length(self) -> int:
        return self.end - self.start


Decoration = Union[LineBackground, HiddenRange]


def compose(
    cache: AnnotationCache,
    document: HostDocument,
    cursor: int,
    viewport: Viewport,
    colors: ColorConfig,
    *,
    enabled: bool,
    matcher: PrefixMatcher,
) -> tuple[Decoration, ...]:
    """Build the ordered decorations for the visible part of ``document``.

    The block holding the cursor is left undecorated so its prefixes can be
    edited. For each marked interior line a ``LineBackground`` is followed by
    a ``HiddenRange`` covering only the matched prefix.
    """

    if not enabled:
        return ()

    with span(
        "engine::compose",
        logger_name=ENGINE,
        component="composer",
        metadata={"cursor": cursor, "viewport": (viewport.start, viewport.end)},
    ) as handle:
        ensure_offset(document, cursor)
        ensure_viewport(document, viewport)

        cursor_block = cache.find_containing(cursor)
        first_visible = document.line_at(viewport.start).index
        decorations: list[Decoration] = []
        for block in cache.overlapping(viewport.start, viewport.end):
            if same_block(block, cursor_block):
                continue
            first = max(block.start_line + 1, first_visible)
            for index in range(first, block.end_line):
                line = document.line(index)
                if line.start > viewport.end:
                    break
                found = matcher.match(line.text)
                if found is None:
                    continue
                decorations.append(
                    LineBackground(
                        line=index,
                        start=line.start,
                        end=line.end,
                        tag=found.tag,
                        color=colors[found.tag],
                    )
                )
                decorations.append(
                    HiddenRange(
                        start=line.start,
                        end=line.start + found.length,
                        tag=found.tag,
                    )
                )
        handle.add_metadata("decorations", len(decorations))
        return tuple(decorations)


__all__ = ["Decoration", "HiddenRange", "LineBackground", "compose"]
