"""Adapter boundary types for reading host document snapshots."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .document import Line


class HostDocument(Protocol):
    """What the engine needs from a host's text storage.

    Offsets and line indices are the host's own; the engine never re-derives
    them. ``line(i).end`` excludes the line terminator.
    """

    @property
    def line_count(self) -> int: ...

    @property
    def length(self) -> int: ...

    def line(self, index: int) -> Line: ...

    def line_at(self, offset: int) -> Line: ...


class DocumentContractError(RuntimeError):
    """Raised when a host passes an offset, line index or range out of bounds."""

    def __init__(
        self,
        message: str,
        *,
        offset: int | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.line = line
