"""Markup constructs understood by the shortcut engine."""

from __future__ import annotations

from enum import Enum


class ElementKind(Enum):
    """Inline formatting element of the PublishR (kramdown-like) dialect."""

    EMPHASIS = "emphasis"
    STRONG = "strong"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"
    FOOTNOTE = "footnote"
    SEPARATOR = "separator"  # Table column
    NAME = "name"
    TITLE = "title"
    IMAGE = "image"
    LINK = "link"


class BlockType(Enum):
    """Classification of a character run in a structural scan."""

    FORMATTING_ELEMENT = "element"
    SHORTCUT = "shortcut"
    TEXT = "text"
