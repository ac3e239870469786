"""Invalidation state machine deciding when to rescan and when to recompose."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from codemark.config import ColorConfig, EngineSettings
from codemark.document import HostDocument, Viewport, ensure_offset, ensure_viewport
from codemark.runtime.telemetry import ENGINE, Event, record_event, span

from .cache import AnnotationCache, same_block
from .decorations import Decoration, compose


@dataclass(frozen=True, slots=True)
class EngineEvent:
    """One host change notification."""

    cursor: int
    viewport: Viewport
    doc_changed: bool = False
    cursor_moved: bool = False
    viewport_changed: bool = False

    @classmethod
    def edit(cls, cursor: int, viewport: Viewport) -> "EngineEvent":
        return cls(cursor, viewport, doc_changed=True, cursor_moved=True)

    @classmethod
    def move(cls, cursor: int, viewport: Viewport) -> "EngineEvent":
        return cls(cursor, viewport, cursor_moved=True)

    @classmethod
    def scroll(cls, cursor: int, viewport: Viewport) -> "EngineEvent":
        return cls(cursor, viewport, viewport_changed=True)


@dataclass(frozen=True, slots=True)
class EngineState:
    cache: AnnotationCache
    last_cursor: int
    last_colors: ColorConfig
    decorations: tuple[Decoration, ...] = ()


@dataclass(frozen=True, slots=True)
class Transition:
    """Result of ``apply_event``: the next state and the work it took."""

    state: EngineState
    scanned: bool = False
    composed: bool = False


def _compose(
    state: EngineState,
    document: HostDocument,
    event: EngineEvent,
    settings: EngineSettings,
) -> tuple[Decoration, ...]:
    return compose(
        state.cache,
        document,
        event.cursor,
        event.viewport,
        state.last_colors,
        enabled=settings.enabled,
        matcher=settings.matcher(),
    )


def initial_state(
    document: HostDocument,
    settings: EngineSettings,
    *,
    cursor: int = 0,
    viewport: Optional[Viewport] = None,
) -> EngineState:
    """Scan ``document`` and compose its first decoration set."""

    visible = viewport or Viewport.whole(document.length)
    state = EngineState(
        cache=AnnotationCache.build(document),
        last_cursor=cursor,
        last_colors=settings.colors,
    )
    decorations = _compose(state, document, EngineEvent(cursor, visible), settings)
    return replace(state, decorations=decorations)


def apply_event(
    state: EngineState,
    event: EngineEvent,
    *,
    document: HostDocument,
    settings: EngineSettings,
) -> Transition:
    """Advance ``state`` by one host event.

    Colors are refreshed first on every event. An edit rescans and recomposes
    and nothing else is checked. Otherwise a cursor move recomposes only when
    it enters or leaves a block, and a viewport change always recomposes.
    At most one scan and one compose happen per call; ``state`` itself is
    never modified, so a failing call leaves the caller's state usable.
    """

    with span(
        "controller::apply_event",
        logger_name=ENGINE,
        component="controller",
        metadata={
            "doc_changed": event.doc_changed,
            "cursor_moved": event.cursor_moved,
            "viewport_changed": event.viewport_changed,
        },
    ):
        ensure_offset(document, event.cursor)
        ensure_viewport(document, event.viewport)
        state = replace(state, last_colors=settings.colors)

        if event.doc_changed:
            state = replace(state, cache=state.cache.rebuild(document))
            state = replace(
                state,
                decorations=_compose(state, document, event, settings),
                last_cursor=event.cursor,
            )
            record_event(Event.RESCAN, blocks=len(state.cache))
            return Transition(state, scanned=True, composed=True)

        recompose = False
        if event.cursor_moved:
            before = state.cache.find_containing(state.last_cursor)
            after = state.cache.find_containing(event.cursor)
            if not same_block(before, after):
                recompose = True
            state = replace(state, last_cursor=event.cursor)

        if event.viewport_changed:
            recompose = True

        if not recompose:
            record_event(Event.SKIP, cursor=event.cursor)
            return Transition(state)

        state = replace(state, decorations=_compose(state, document, event, settings))
        record_event(Event.RECOMPOSE, decorations=len(state.decorations))
        return Transition(state, composed=True)


class UpdateController:
    """Holds the single ``EngineState`` and swaps it after each event.

    ``scan_count`` and ``compose_count`` tally the work done by events so
    hosts and tests can observe the invalidation decisions.
    """

    def __init__(
        self,
        document: HostDocument,
        settings: EngineSettings | None = None,
        *,
        cursor: int = 0,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self.settings = settings or EngineSettings.default()
        self.document = document
        self.state = initial_state(
            document, self.settings, cursor=cursor, viewport=viewport
        )
        self.scan_count = 0
        self.compose_count = 0
        self.last_transition: Optional[Transition] = None

    @property
    def decorations(self) -> tuple[Decoration, ...]:
        return self.state.decorations

    @property
    def cache(self) -> AnnotationCache:
        return self.state.cache

    def handle(
        self,
        event: EngineEvent,
        *,
        document: Optional[HostDocument] = None,
        settings: Optional[EngineSettings] = None,
    ) -> Transition:
        """Apply ``event`` against the latest document and settings snapshots."""

        next_document = document if document is not None else self.document
        next_settings = settings if settings is not None else self.settings
        transition = apply_event(
            self.state, event, document=next_document, settings=next_settings
        )
        self.document = next_document
        self.settings = next_settings
        self.state = transition.state
        self.last_transition = transition
        self.scan_count += int(transition.scanned)
        self.compose_count += int(transition.composed)
        return transition


__all__ = [
    "EngineEvent",
    "EngineState",
    "Transition",
    "UpdateController",
    "apply_event",
    "initial_state",
]
