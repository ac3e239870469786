"""Textual host adapter. The runnable demo lives in ``app`` and needs textual."""

from .controller import TextualDecorationAdapter, TextualUIHooks

__all__ = ["TextualDecorationAdapter", "TextualUIHooks"]
