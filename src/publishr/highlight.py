"""Formatting highlight marks for an editor.

Presentation adapter only: turns ``Formatter.parse_structure`` spans and
extra footnote declarations into coloured, tool-tipped character ranges.
Nothing here affects translated text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from publishr.config import get_settings
from publishr.filter.patterns import EXTRA_FOOTNOTE_PATTERN
from publishr.formatting.elements import BlockType, ElementKind
from publishr.formatting.formatter import Formatter

if TYPE_CHECKING:
    from publishr.config import HighlightConfig

FOOTNOTE_HINT = "Extra footnote, moved to the end of the document"

ELEMENT_TOOLTIPS: dict[ElementKind, str] = {
    ElementKind.EMPHASIS: "Emphasis",
    ElementKind.STRONG: "Strong emphasis",
    ElementKind.SUPERSCRIPT: "Superscript",
    ElementKind.SUBSCRIPT: "Subscript",
    ElementKind.FOOTNOTE: "Footnote reference",
    ElementKind.SEPARATOR: "Table column separator",
    ElementKind.NAME: "Name",
    ElementKind.TITLE: "Title",
    ElementKind.IMAGE: "Image",
    ElementKind.LINK: "Link",
}


@dataclass(frozen=True)
class HighlightMark:
    """A coloured character range ``[start, end)`` with a tooltip."""

    start: int
    end: int
    color: str
    tooltip: str


def get_marks(
    translation_text: str | None,
    formatter: Formatter | None = None,
    config: HighlightConfig | None = None,
) -> list[HighlightMark]:
    """Compute highlight marks for a translation in markup form.

    Args:
        translation_text: Text being edited, or ``None`` when there is none.
        formatter: Formatter used for the structural scan.
        config: Colours; read from ``get_settings()`` when omitted.

    Returns:
        Marks for extra footnote declarations first, then for every
        formatting element of the restored markup.
    """
    if not translation_text:
        return []
    if formatter is None:
        formatter = Formatter()
    if config is None:
        config = get_settings().highlight

    # Open tag, footnote text, close tag
    group_colors = {
        1: config.tag_color,
        2: config.footnote_color,
        3: config.tag_color,
    }

    result: list[HighlightMark] = []
    for match in EXTRA_FOOTNOTE_PATTERN.finditer(translation_text):
        for group, color in group_colors.items():
            result.append(
                HighlightMark(
                    match.start(group), match.end(group), color, FOOTNOTE_HINT
                )
            )

    for span in formatter.parse_structure(translation_text, True, False):
        if span.block_type is not BlockType.FORMATTING_ELEMENT or span.element is None:
            continue
        result.append(
            HighlightMark(
                span.begin,
                span.end,
                config.tag_color,
                ELEMENT_TOOLTIPS[span.element],
            )
        )

    return result
