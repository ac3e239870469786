"""Add, swap or remove prefix markers on a range of lines."""

from __future__ import annotations

from dataclasses import dataclass

from codemark.document import HostDocument, ensure_line_index
from codemark.markers import HighlightTag, PrefixTable
from codemark.runtime.telemetry import ACTIONS, span


@dataclass(frozen=True, slots=True)
class LineEdit:
    """Replace ``[start, end)`` of the document text with ``text``."""

    start: int
    end: int
    text: str

    def apply(self, source: str) -> str:
        return source[: self.start] + self.text + source[self.end :]


def strip_prefix(line: str, table: PrefixTable) -> str:
    for rule in table:
        if line.startswith(rule.prefix):
            return line[len(rule.prefix) :]
    return line


def toggle_prefix(
    document: HostDocument,
    first_line: int,
    last_line: int,
    tag: HighlightTag | str,
    table: PrefixTable,
) -> LineEdit:
    """Toggle ``tag``'s prefix on every line from ``first_line`` to ``last_line``.

    When all lines already carry the prefix it is removed. Otherwise each
    line loses whatever known prefix it had and gains the target one.
    """

    target = HighlightTag(tag)
    prefix = next((rule.prefix for rule in table if rule.tag == target), None)
    if prefix is None:
        raise KeyError(f"No prefix registered for '{target.value}'")

    lo, hi = sorted((first_line, last_line))
    ensure_line_index(document, lo)
    ensure_line_index(document, hi)

    with span(
        "actions::toggle_prefix",
        logger_name=ACTIONS,
        metadata={"tag": target.value, "lines": f"{lo}-{hi}"},
    ):
        lines = [document.line(index) for index in range(lo, hi + 1)]
        texts = [line.text for line in lines]
        if all(text.startswith(prefix) for text in texts):
            updated = [text[len(prefix) :] for text in texts]
        else:
            updated = [
                text if text.startswith(prefix) else prefix + strip_prefix(text, table)
                for text in texts
            ]
        return LineEdit(lines[0].start, lines[-1].end, "\n".join(updated))


__all__ = ["LineEdit", "strip_prefix", "toggle_prefix"]
