"""Positional span records produced by structural scans."""

from __future__ import annotations

from dataclasses import dataclass

from publishr.formatting.elements import BlockType, ElementKind


@dataclass(frozen=True, slots=True)
class FormatSpan:
    """A half-open ``[begin, end)`` run of a string.

    Attributes:
        block_type: Whether the run is markup, a shortcut tag or text.
        element: Element owning the run, or ``None`` for unowned text.
        begin: Start character offset (inclusive).
        end: End character offset (exclusive).
    """

    block_type: BlockType
    element: ElementKind | None
    begin: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.begin

    def text_of(self, text: str) -> str:
        """Return the slice of *text* covered by this span."""
        return text[self.begin : self.end]
