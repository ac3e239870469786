"""Read-only document snapshots and host position types."""

from .document import Line, TextDocument
from .state import Offset, Viewport
from .sync import DocumentContractError, HostDocument
from .validation import ensure_line_index, ensure_offset, ensure_viewport

__all__ = [
    "Line",
    "TextDocument",
    "Offset",
    "Viewport",
    "HostDocument",
    "DocumentContractError",
    "ensure_offset",
    "ensure_line_index",
    "ensure_viewport",
]
