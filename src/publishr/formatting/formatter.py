"""Format conversion manager.

Applies every element converter in a fixed order.  Order matters: later
converters see text already rewritten by earlier ones, and multi-character
markers (``**``) must be consumed before shorter overlapping ones (``*``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from publishr.formatting.converter import ElementConverter
from publishr.formatting.elements import BlockType, ElementKind
from publishr.formatting.spans import FormatSpan

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, MutableMapping

logger = logging.getLogger(__name__)

# Fills strong emphasis markers after their scan so that emphasis does not
# see them again. One filler character per masked character keeps offsets.
_CORK = "@"


@dataclass(frozen=True, slots=True)
class _ElementSpec:
    """Constructor arguments of one element converter."""

    pattern: str
    shortcut_name: str
    text_group: int
    extra_group: int = 0
    left: str | None = None
    right: str | None = None


# Insertion order is conversion order.
ELEMENT_SPECS: dict[ElementKind, _ElementSpec] = {
    ElementKind.STRONG: _ElementSpec(
        r"(?<!\\)(\*{2})(?!\s)(.+?)(?<![\s\\])(\*{2})", "e2", 2, left="**", right="**"
    ),
    ElementKind.EMPHASIS: _ElementSpec(
        r"(?<!\\)(\*)(?!\s)(.+?)(?<![\s\\])(\*)", "e1", 2, left="*", right="*"
    ),
    ElementKind.FOOTNOTE: _ElementSpec(r"(\[\^.+?\])", "f", 0),
    ElementKind.SEPARATOR: _ElementSpec(r"(?<!\\)(\|)", "s1", 0),
    ElementKind.SUPERSCRIPT: _ElementSpec(
        r"(\^)(.+?)(\^)", "s2", 2, left="^", right="^"
    ),
    ElementKind.SUBSCRIPT: _ElementSpec(r"(~)(.+?)(~)", "s3", 2, left="~", right="~"),
    ElementKind.NAME: _ElementSpec(
        r"(name\()(.+?)(\))", "n1", 2, left="name(", right=")"
    ),
    ElementKind.TITLE: _ElementSpec(
        r"(title\()(.+?)(\))", "t1", 2, left="title(", right=")"
    ),
    ElementKind.IMAGE: _ElementSpec(r"(!\[)(.*?)(\]\(.+?\))", "i", 2),
    ElementKind.LINK: _ElementSpec(r"(\[)(.+?)(\]\()(.+?)(\))", "a", 2, extra_group=4),
}


class Formatter:
    """Ordered collection of element converters sharing one document lifetime."""

    def __init__(self) -> None:
        self._converters: dict[ElementKind, ElementConverter] = {
            kind: ElementConverter(
                spec.pattern,
                spec.shortcut_name,
                spec.text_group,
                spec.extra_group,
                spec.left,
                spec.right,
            )
            for kind, spec in ELEMENT_SPECS.items()
        }

    def __iter__(self) -> Iterator[tuple[ElementKind, ElementConverter]]:
        return iter(self._converters.items())

    def reset_converters(self) -> None:
        """Reset all converters. Call once per document."""
        for converter in self._converters.values():
            converter.reset()
        logger.debug("Converters reset")

    def to_shortcuts(self, text: str, extras: MutableMapping[str, str]) -> str:
        """Substitute original formatting with shortcuts.

        Args:
            text: Text with original formatting.
            extras: Receives element specific extra strings, keyed by shortcut.

        Returns:
            Text with shortcuts.
        """
        result = text
        for converter in self._converters.values():
            result = converter.to_shortcuts(result, extras)
        return result

    def to_original(self, text: str, extras: Mapping[str, str]) -> str:
        """Substitute shortcuts with original formatting.

        Converters run in the same order as ``to_shortcuts``; each one only
        rewrites its own tag literals.  Restored bracket text can still hold
        tags of earlier elements (a ``~`` or ``|`` inside a URL), so passes
        repeat until the text stops changing, at most once per converter.

        Args:
            text: Text containing shortcuts.
            extras: Source extra string -> translated extra string (like URL).

        Returns:
            Text with original formatting.
        """
        result = text
        for _ in range(len(self._converters)):
            previous = result
            for converter in self._converters.values():
                result = converter.to_original(result, extras)
            if result == previous:
                break
        return result

    def apply_element(self, text: str, element: ElementKind) -> str:
        """Wrap *text* with the brackets of *element*, if it has any."""
        converter = self._converters.get(element)
        if converter is None:
            return text
        return converter.apply_original_formatting(text)

    def parse_structure(
        self,
        text: str,
        find_original: bool = True,
        find_shortcuts: bool = False,
    ) -> list[FormatSpan]:
        """Parse text structure for highlighting.

        Builds a per-character owner layout. Earlier converters win at
        overlapping positions: a cell is overwritten only while it is empty or
        owned by interior text. Unowned runs are reported as ``TEXT`` spans
        with no element, so the result covers *text* contiguously.

        Args:
            text: Input text.
            find_original: Look for original markup.
            find_shortcuts: Look for shortcut tags.

        Returns:
            Ordered, non-overlapping spans in *text* coordinates.
        """
        if not text or not (find_original or find_shortcuts):
            return []

        # layout[i] is the id of the span owning position i; 0 means unowned.
        layout = [0] * len(text)
        owners: dict[int, FormatSpan] = {}
        scan_text = text

        for kind, converter in self._converters.items():
            hits = converter.get_format_structure(
                scan_text, find_original, find_shortcuts
            )
            hits.sort(key=lambda span: span.begin)

            for hit in hits:
                span_id = len(owners) + 1
                owners[span_id] = FormatSpan(hit.block_type, kind, hit.begin, hit.end)
                for i in range(hit.begin, hit.end):
                    owner = layout[i]
                    if owner == 0 or owners[owner].block_type is BlockType.TEXT:
                        layout[i] = span_id

            if kind is ElementKind.STRONG:
                scan_text = _cork_elements(scan_text, hits)

        return _compress_layout(layout, owners)


def _cork_elements(text: str, hits: list[FormatSpan]) -> str:
    """Mask formatting-element runs of *text* with same-length filler."""
    parts: list[str] = []
    last_position = 0
    for hit in hits:
        if hit.begin < last_position:
            continue
        parts.append(text[last_position : hit.begin])
        if hit.block_type is BlockType.FORMATTING_ELEMENT:
            parts.append(_CORK * hit.length)
        else:
            parts.append(text[hit.begin : hit.end])
        last_position = hit.end
    parts.append(text[last_position:])
    return "".join(parts)


def _compress_layout(
    layout: list[int], owners: dict[int, FormatSpan]
) -> list[FormatSpan]:
    """Emit one span per maximal run of identical owner id."""
    result: list[FormatSpan] = []
    run_begin = 0
    for i in range(1, len(layout) + 1):
        if i < len(layout) and layout[i] == layout[run_begin]:
            continue
        owner = layout[run_begin]
        if owner == 0:
            result.append(FormatSpan(BlockType.TEXT, None, run_begin, i))
        else:
            span = owners[owner]
            result.append(FormatSpan(span.block_type, span.element, run_begin, i))
        run_begin = i
    return result
