"""Latest block list plus point-containment lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from codemark.document import HostDocument

from .blocks import CodeBlock, scan


@dataclass(frozen=True, slots=True)
class AnnotationCache:
    """Immutable holder for the blocks found by the most recent scan.

    Blocks never overlap, so the first containing block is the only one.
    """

    blocks: tuple[CodeBlock, ...] = ()

    @classmethod
    def build(cls, document: HostDocument) -> "AnnotationCache":
        return cls(scan(document))

    def rebuild(self, document: HostDocument) -> "AnnotationCache":
        """Return a cache holding a fresh scan of ``document``."""

        return AnnotationCache.build(document)

    def find_containing(self, offset: int) -> Optional[CodeBlock]:
        for block in self.blocks:
            if block.contains(offset):
                return block
        return None

    def overlapping(self, start: int, end: int) -> Iterator[CodeBlock]:
        for block in self.blocks:
            if not (block.end < start or block.start > end):
                yield block

    def __len__(self) -> int:
        return len(self.blocks)


def same_block(left: Optional[CodeBlock], right: Optional[CodeBlock]) -> bool:
    """Compare by offsets; ``None`` only equals ``None``."""

    if left is None or right is None:
        return left is right
    return left.key == right.key


__all__ = ["AnnotationCache", "same_block"]
