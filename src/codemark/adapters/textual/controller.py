"""Adapter that turns editor notifications into engine events and UI updates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from codemark.actions import toggle_prefix
from codemark.config import EngineSettings
from codemark.document import DocumentContractError, TextDocument, Viewport
from codemark.engine import (
    Decoration,
    EngineEvent,
    LineBackground,
    Transition,
    UpdateController,
)
from codemark.markers import HighlightTag


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_decorations: Callable[
        [TextDocument, tuple[Decoration, ...], Viewport], None
    ]
    update_status: Callable[[str], None] = _noop
    replace_text: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualDecorationAdapter:
    """Tracks cursor and viewport for one editor and drives its controller."""

    def __init__(
        self,
        hooks: TextualUIHooks,
        *,
        text: str = "",
        settings: Optional[EngineSettings] = None,
        cursor: int = 0,
        viewport: Optional[Viewport] = None,
    ) -> None:
        self.hooks = hooks
        document = TextDocument.from_text(text)
        self.cursor = cursor
        self.viewport = viewport or Viewport.whole(document.length)
        self.controller = UpdateController(
            document, settings, cursor=cursor, viewport=self.viewport
        )
        self._publish()

    @property
    def document(self) -> TextDocument:
        document = self.controller.document
        assert isinstance(document, TextDocument)
        return document

    def handle_edit(
        self, text: str, cursor: int, *, viewport: Optional[Viewport] = None
    ) -> Transition:
        document = self.document.replace(text)
        visible = viewport or _clamp(self.viewport, document.length)
        return self._dispatch(
            EngineEvent.edit(cursor, visible), document=document, cursor=cursor
        )

    def handle_cursor(self, cursor: int) -> Transition:
        if cursor == self.cursor:
            return Transition(self.controller.state)
        return self._dispatch(EngineEvent.move(cursor, self.viewport), cursor=cursor)

    def handle_scroll(self, viewport: Viewport) -> Transition:
        if viewport == self.viewport:
            return Transition(self.controller.state)
        return self._dispatch(
            EngineEvent.scroll(self.cursor, viewport), viewport=viewport
        )

    def handle_settings(self, settings: EngineSettings) -> Transition:
        """Swap the settings snapshot and redraw the current viewport."""

        event = EngineEvent(self.cursor, self.viewport, viewport_changed=True)
        return self._dispatch(event, settings=settings)

    def toggle(
        self, tag: HighlightTag | str, first_line: int, last_line: int
    ) -> Transition:
        """Toggle a prefix on a line range and feed the result back as an edit."""

        edit = toggle_prefix(
            self.document,
            first_line,
            last_line,
            tag,
            self.controller.settings.prefixes,
        )
        text = edit.apply(self.document.text)
        self.hooks.replace_text(text)
        cursor = min(self.cursor, len(text))
        return self.handle_edit(text, cursor)

    def _dispatch(
        self,
        event: EngineEvent,
        *,
        document: Optional[TextDocument] = None,
        settings: Optional[EngineSettings] = None,
        cursor: Optional[int] = None,
        viewport: Optional[Viewport] = None,
    ) -> Transition:
        self._log_state(
            "event ->",
            doc=event.doc_changed,
            moved=event.cursor_moved,
            scrolled=event.viewport_changed,
            cursor=event.cursor,
        )
        try:
            transition = self.controller.handle(
                event, document=document, settings=settings
            )
        except DocumentContractError as exc:
            self.hooks.update_status(f"rejected: {exc}")
            self._log_state("rejected <-", reason=str(exc))
            raise
        self.cursor = event.cursor if cursor is None else cursor
        self.viewport = event.viewport if viewport is None else viewport
        if transition.composed:
            self._publish()
        self._log_state(
            "result <-",
            scanned=transition.scanned,
            composed=transition.composed,
            decorations=len(transition.state.decorations),
        )
        return transition

    def _publish(self) -> None:
        self.hooks.update_decorations(
            self.document, self.controller.decorations, self.viewport
        )
        blocks = len(self.controller.cache)
        marked = sum(
            1
            for item in self.controller.decorations
            if isinstance(item, LineBackground)
        )
        self.hooks.update_status(f"{blocks} blocks, {marked} marked lines")

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "version": self.document.version,
            "cursor": self.cursor,
            "viewport": (self.viewport.start, self.viewport.end),
            "scans": self.controller.scan_count,
            "composes": self.controller.compose_count,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


def _clamp(viewport: Viewport, length: int) -> Viewport:
    return Viewport(min(viewport.start, length), min(viewport.end, length))


__all__ = ["TextualDecorationAdapter", "TextualUIHooks"]
