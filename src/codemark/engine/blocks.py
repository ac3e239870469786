"""Fenced code block detection over a document snapshot."""

from __future__ import annotations

from dataclasses import dataclass

from codemark.document import HostDocument
from codemark.runtime.telemetry import ENGINE, span

FENCE = "```"


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """One fenced region, fence lines included.

    ``start`` is the opener line's first offset and ``end`` the closer line's
    last offset. Only lines strictly between ``start_line`` and ``end_line``
    are ever decorated.
    """

    start: int
    end: int
    start_line: int
    end_line: int

    def __post_init__(self) -> None:
        if self.start >= self.end or self.start_line >= self.end_line:
            raise ValueError(f"degenerate code block {self!r}")

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end

    def interior_lines(self) -> range:
        return range(self.start_line + 1, self.end_line)

    @property
    def key(self) -> tuple[int, int]:
        return (self.start, self.end)


def is_opener(text: str) -> bool:
    # trailing info string (language tag) allowed
    return text.strip().startswith(FENCE)


def is_closer(text: str) -> bool:
    return text.strip() == FENCE


def scan(document: HostDocument) -> tuple[CodeBlock, ...]:
    """Return every terminated fenced block, top to bottom.

    An opener with no closer below it yields nothing and scanning resumes on
    the following line. A closer is consumed by its block and never opens the
    next one.
    """

    with span(
        "engine::scan",
        logger_name=ENGINE,
        component="scanner",
        metadata={"lines": document.line_count},
    ) as handle:
        blocks: list[CodeBlock] = []
        total = document.line_count
        index = 0
        while index < total:
            opener = document.line(index)
            if is_opener(opener.text):
                closer_index = _find_closer(document, index + 1, total)
                if closer_index is not None:
                    closer = document.line(closer_index)
                    blocks.append(
                        CodeBlock(
                            start=opener.start,
                            end=closer.end,
                            start_line=index,
                            end_line=closer_index,
                        )
                    )
                    index = closer_index + 1
                    continue
            index += 1
        handle.add_metadata("blocks", len(blocks))
        return tuple(blocks)


def _find_closer(document: HostDocument, first: int, total: int) -> int | None:
    for index in range(first, total):
        if is_closer(document.line(index).text):
            return index
    return None


__all__ = ["CodeBlock", "FENCE", "is_closer", "is_opener", "scan"]
