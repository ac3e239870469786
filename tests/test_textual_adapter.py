from __future__ import annotations

from typing import List, Tuple

import pytest

from codemark.adapters.textual import TextualDecorationAdapter, TextualUIHooks
from codemark.config import EngineSettings
from codemark.document import DocumentContractError, TextDocument, Viewport
from codemark.engine import Decoration, LineBackground
from codemark.markers import HighlightTag

TEXT = "intro\n```\n>>>> marked\nplain\n```"

Published = Tuple[TextDocument, Tuple[Decoration, ...], Viewport]


def make_adapter(
    published: List[Published] | None = None,
    statuses: List[str] | None = None,
    logs: List[str] | None = None,
    replaced: List[str] | None = None,
) -> TextualDecorationAdapter:
    sink = published if published is not None else []
    hooks = TextualUIHooks(
        update_decorations=lambda doc, decos, vp: sink.append((doc, decos, vp)),
        update_status=(statuses.append if statuses is not None else lambda _: None),
        log=(logs.append if logs is not None else lambda _: None),
        replace_text=(replaced.append if replaced is not None else lambda _: None),
    )
    return TextualDecorationAdapter(hooks, text=TEXT)


def marked(decorations: Tuple[Decoration, ...]) -> List[int]:
    return [item.line for item in decorations if isinstance(item, LineBackground)]


def test_adapter_publishes_initial_decorations() -> None:
    published: List[Published] = []
    statuses: List[str] = []

    make_adapter(published, statuses)

    assert len(published) == 1
    assert marked(published[0][1]) == [2]
    assert statuses[-1] == "1 blocks, 1 marked lines"


def test_cursor_inside_block_hides_then_restores() -> None:
    published: List[Published] = []
    adapter = make_adapter(published)
    inside = adapter.document.line(3).start

    adapter.handle_cursor(inside)
    assert marked(published[-1][1]) == []

    adapter.handle_cursor(inside + 1)
    assert len(published) == 2

    adapter.handle_cursor(0)
    assert marked(published[-1][1]) == [2]


def test_scroll_recomposes_without_rescanning() -> None:
    published: List[Published] = []
    adapter = make_adapter(published)

    adapter.handle_scroll(Viewport(0, 5))

    assert adapter.controller.scan_count == 0
    assert marked(published[-1][1]) == []
    assert published[-1][2] == Viewport(0, 5)

    adapter.handle_scroll(Viewport(0, 5))
    assert len(published) == 2


def test_edit_rescans_new_text() -> None:
    published: List[Published] = []
    adapter = make_adapter(published)

    text = TEXT + "\n```\n>>>- gone\n```"

    adapter.handle_edit(text, 0, viewport=Viewport.whole(len(text)))

    assert adapter.controller.scan_count == 1
    assert adapter.document.version == 1
    assert marked(published[-1][1]) == [2, 6]


def test_settings_change_redraws() -> None:
    published: List[Published] = []
    adapter = make_adapter(published)

    adapter.handle_settings(EngineSettings.default().with_overrides(enabled=False))

    assert published[-1][1] == ()


def test_toggle_rewrites_text_and_rescans() -> None:
    replaced: List[str] = []
    published: List[Published] = []
    adapter = make_adapter(published, replaced=replaced)

    adapter.toggle(HighlightTag.DIFF_ADD, 3, 3)

    assert replaced == ["intro\n```\n>>>> marked\n>>>+ plain\n```"]
    assert adapter.document.text == replaced[0]
    assert marked(published[-1][1]) == [2, 3]


def test_contract_violation_is_reported_and_raised() -> None:
    statuses: List[str] = []
    adapter = make_adapter(statuses=statuses)
    state = adapter.controller.state

    with pytest.raises(DocumentContractError):
        adapter.handle_cursor(10_000)

    assert statuses[-1].startswith("rejected:")
    assert adapter.controller.state is state
    assert adapter.cursor == 0


def test_adapter_emits_log_lines() -> None:
    logs: List[str] = []
    adapter = make_adapter(logs=logs)

    adapter.handle_cursor(3)

    assert any(line.startswith("event ->") for line in logs)
    assert any(line.startswith("result <-") for line in logs)
