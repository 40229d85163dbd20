"""Editor actions: footnote insertion and selection wrapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from publishr.filter.patterns import EXTRA_FOOTNOTE_TAGNAME

if TYPE_CHECKING:
    from publishr.formatting.elements import ElementKind
    from publishr.formatting.formatter import Formatter

FOOTNOTE_TEXT_HINT = "Footnote text"


def extra_footnote_tag_pair(hint: str = FOOTNOTE_TEXT_HINT) -> str:
    """Text inserted by the "insert footnote" menu action."""
    return f"<{EXTRA_FOOTNOTE_TAGNAME}>{hint}</{EXTRA_FOOTNOTE_TAGNAME}>"


def wrap_selection(formatter: Formatter, selection: str, element: ElementKind) -> str:
    """Wrap the selected text with *element*'s markup, when it has brackets."""
    return formatter.apply_element(selection, element)
