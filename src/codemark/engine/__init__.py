"""Block scanning, containment cache, decoration composition and updates."""

from .blocks import FENCE, CodeBlock, is_closer, is_opener, scan
from .cache import AnnotationCache, same_block
from .decorations import Decoration, HiddenRange, LineBackground, compose
from .controller import (
    EngineEvent,
    EngineState,
    Transition,
    UpdateController,
    apply_event,
    initial_state,
)

__all__ = [
    "FENCE",
    "CodeBlock",
    "is_opener",
    "is_closer",
    "scan",
    "AnnotationCache",
    "same_block",
    "Decoration",
    "HiddenRange",
    "LineBackground",
    "compose",
    "EngineEvent",
    "EngineState",
    "Transition",
    "UpdateController",
    "apply_event",
    "initial_state",
]
