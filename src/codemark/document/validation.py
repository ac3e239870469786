"""Bounds checks applied to host-supplied positions."""

from __future__ import annotations

from .state import Offset, Viewport
from .sync import DocumentContractError, HostDocument


def ensure_offset(document: HostDocument, offset: Offset) -> Offset:
    if offset < 0 or offset > document.length:
        raise DocumentContractError("Offset out of range", offset=offset)
    return offset


def ensure_line_index(document: HostDocument, index: int) -> int:
    if index < 0 or index >= document.line_count:
        raise DocumentContractError("Line index out of range", line=index)
    return index


def ensure_viewport(document: HostDocument, viewport: Viewport) -> Viewport:
    ensure_offset(document, viewport.start)
    ensure_offset(document, viewport.end)
    return viewport
