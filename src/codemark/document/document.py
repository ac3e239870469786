"""Line-indexed text snapshots the engine scans and decorates."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from .sync import DocumentContractError


@dataclass(frozen=True, slots=True)
class Line:
    index: int
    start: int
    end: int
    text: str


@dataclass(frozen=True, slots=True)
class TextDocument:
    """Immutable list-of-lines snapshot with precomputed line start offsets.

    Lines are joined by a single ``\\n``; offsets count characters of that
    joined text. A trailing newline yields a final empty line, and the empty
    document has exactly one empty line.
    """

    _lines: tuple[str, ...] = ("",)
    _starts: tuple[int, ...] = field(default=(0,), repr=False, compare=False)
    version: int = 0

    @classmethod
    def from_text(cls, text: str, *, version: int = 0) -> "TextDocument":
        return cls.from_lines(text.split("\n"), version=version)

    @classmethod
    def from_lines(
        cls, lines: Sequence[str], *, version: int = 0
    ) -> "TextDocument":
        rows = tuple(lines) or ("",)
        starts: list[int] = []
        running = 0
        for row in rows:
            starts.append(running)
            running += len(row) + 1
        return cls(_lines=rows, _starts=tuple(starts), version=version)

    def replace(self, text: str) -> "TextDocument":
        """Return a new snapshot of ``text`` with the version bumped."""

        return TextDocument.from_text(text, version=self.version + 1)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def length(self) -> int:
        last = len(self._lines) - 1
        return self._starts[last] + len(self._lines[last])

    def line(self, index: int) -> Line:
        if index < 0 or index >= len(self._lines):
            raise DocumentContractError("Line index out of range", line=index)
        start = self._starts[index]
        text = self._lines[index]
        return Line(index=index, start=start, end=start + len(text), text=text)

    def line_at(self, offset: int) -> Line:
        if offset < 0 or offset > self.length:
            raise DocumentContractError("Offset out of range", offset=offset)
        return self.line(bisect_right(self._starts, offset) - 1)

    def offset_of(self, row: int, column: int) -> int:
        """Translate a ``(row, column)`` location into an absolute offset."""

        line = self.line(row)
        if column < 0 or column > len(line.text):
            raise DocumentContractError("Column out of range", line=row)
        return line.start + column

    def lines(self) -> Iterator[Line]:
        for index in range(len(self._lines)):
            yield self.line(index)
