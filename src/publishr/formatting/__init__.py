"""Shortcut conversion engine for inline PublishR markup."""

from publishr.formatting.converter import ElementConverter
from publishr.formatting.elements import BlockType, ElementKind
from publishr.formatting.formatter import ELEMENT_SPECS, Formatter
from publishr.formatting.plain import PlainShortcutConverter
from publishr.formatting.spans import FormatSpan

__all__ = [
    "ELEMENT_SPECS",
    "BlockType",
    "ElementConverter",
    "ElementKind",
    "FormatSpan",
    "Formatter",
    "PlainShortcutConverter",
]
