"""Cursor and viewport positions expressed as absolute document offsets."""

from __future__ import annotations

from dataclasses import dataclass

Offset = int


@dataclass(frozen=True, slots=True)
class Viewport:
    """Visible offset range, inclusive on both ends."""

    start: Offset
    end: Offset

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"viewport start {self.start} is past end {self.end}")

    def overlaps(self, start: Offset, end: Offset) -> bool:
        return not (end < self.start or start > self.end)

    @classmethod
    def whole(cls, length: int) -> "Viewport":
        return cls(0, length)
