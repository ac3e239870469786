"""Executable Textual app: a TextArea editor beside a decorated preview."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual.app import App, ComposeResult
    from textual.containers import Horizontal
    from textual.widgets import Footer, Header, Static, TextArea
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use codemark.adapters.textual.app"
    ) from exc

from codemark.config import EngineSettings
from codemark.document import TextDocument, Viewport
from codemark.engine import Decoration
from codemark.markers import HighlightTag
from codemark.rendering import render_visible
from codemark.runtime import telemetry

from .controller import TextualDecorationAdapter, TextualUIHooks

SAMPLE = """# codemark demo

Move the cursor into a block to reveal its raw prefixes.

```python
def greet(name):
>>>>     return f"hello {name}"
```

```diff
>>>- old = compute()
>>>+ new = compute_faster()
unchanged()
```
"""


class CodemarkApp(App[None]):
    """Live preview of code-block line decorations."""

    CSS = """
	#editor {
		width: 1fr;
		border: round $accent;
	}

	#preview {
		width: 1fr;
		border: round $secondary;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("f2", "toggle('highlight')", "Highlight"),
        ("f3", "toggle('diff-add')", "Diff +"),
        ("f4", "toggle('diff-remove')", "Diff -"),
        ("f5", "toggle_enabled", "On/Off"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str = SAMPLE, settings: EngineSettings | None = None):
        super().__init__()
        self._initial_text = text
        self._settings = settings or EngineSettings.default()
        self.adapter: TextualDecorationAdapter | None = None
        self._editor: TextArea | None = None
        self._preview: Static | None = None
        self._status: Static | None = None
        self._log = telemetry.get_logger(telemetry.ADAPTER)

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal():
            self._editor = TextArea(self._initial_text, id="editor")
            yield self._editor
            self._preview = Static("", id="preview")
            yield self._preview
        self._status = Static("", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            update_decorations=self._update_preview,
            update_status=self._update_status,
            replace_text=self._replace_text,
            log=self._log.debug,
        )
        self.adapter = TextualDecorationAdapter(
            hooks, text=self._initial_text, settings=self._settings
        )
        self.set_interval(0.1, self._poll_viewport)

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if not self.adapter:
            return
        text = event.text_area.text
        if text == self.adapter.document.text:
            return
        document = TextDocument.from_text(text)
        cursor = document.offset_of(*event.text_area.cursor_location)
        self.adapter.handle_edit(text, cursor, viewport=self._visible(document))

    def on_text_area_selection_changed(
        self, event: TextArea.SelectionChanged
    ) -> None:
        if not self.adapter or event.text_area.text != self.adapter.document.text:
            return
        row, column = event.selection.end
        self.adapter.handle_cursor(self.adapter.document.offset_of(row, column))

    def action_toggle(self, tag: str) -> None:
        if not self.adapter or not self._editor:
            return
        start, end = self._editor.selection
        self.adapter.toggle(HighlightTag(tag), start[0], end[0])

    def action_toggle_enabled(self) -> None:
        if not self.adapter:
            return
        current = self.adapter.controller.settings
        self.adapter.handle_settings(
            current.with_overrides(enabled=not current.enabled)
        )

    def _poll_viewport(self) -> None:
        if self.adapter:
            self.adapter.handle_scroll(self._visible(self.adapter.document))

    def _visible(self, document: TextDocument) -> Viewport:
        if not self._editor:
            return Viewport.whole(document.length)
        top = min(self._editor.scroll_offset.y, document.line_count - 1)
        bottom = min(top + max(self._editor.size.height, 1), document.line_count) - 1
        return Viewport(document.line(top).start, document.line(bottom).end)

    def _update_preview(
        self,
        document: TextDocument,
        decorations: tuple[Decoration, ...],
        viewport: Viewport,
    ) -> None:
        if self._preview:
            self._preview.update(render_visible(document, decorations, viewport))

    def _update_status(self, status: str) -> None:
        if self._status:
            self._status.update(status)

    def _replace_text(self, text: str) -> None:
        if self._editor:
            self._editor.text = text


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the codemark Textual demo.")
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Markdown file to open (default: built-in sample)",
    )
    parser.add_argument(
        "--disabled",
        action="store_true",
        default=os.environ.get("CODEMARK_DISABLED", "") == "1",
        help="Start with decorations turned off",
    )
    parser.add_argument(
        "--telemetry",
        choices=telemetry.PRESETS,
        default=os.environ.get("CODEMARK_TELEMETRY_PRESET", "demo"),
        help="Telemetry preset; 'demo' logs to a file so the screen stays clean",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(args.telemetry)
    text = args.path.read_text(encoding="utf-8") if args.path else SAMPLE
    settings = EngineSettings.default().with_overrides(enabled=not args.disabled)
    CodemarkApp(text=text, settings=settings).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
