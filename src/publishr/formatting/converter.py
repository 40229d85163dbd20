"""Shortcut conversion for a single formatting element.

An ``ElementConverter`` owns one forward pattern (matching original markup)
and one reverse pattern (matching the shortcut tags it emitted).  Forward
substitution replaces every markup occurrence with ``<name>text</name>`` or
``<name/>``; reverse substitution restores the recorded bracket text.

Shortcut state lives for a whole document so that recurring bracket
literals map to the same shortcut on every line.  Call ``reset()`` before
the first line of each new document.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from publishr.formatting.elements import BlockType
from publishr.formatting.spans import FormatSpan

if TYPE_CHECKING:
    from collections.abc import Mapping, MutableMapping

logger = logging.getLogger(__name__)

_DIGIT = re.compile(r"\d")

# Separates first and last label fragments in registry keys.
# Tabulation is assumed never to appear inside bracket literals.
_LABEL_SEPARATOR = "\t"


@dataclass
class ConverterState:
    """Per-document shortcut allocation state of one converter.

    Attributes:
        shortcuts: Label key (``first + "\\t" + last``) -> shortcut name.
        originals: Emitted shortcut literal -> bracket text it replaced.
        counter: Last allocated shortcut number.
    """

    shortcuts: dict[str, str] = field(default_factory=dict)
    originals: dict[str, str] = field(default_factory=dict)
    counter: int = 0

    def clear(self) -> None:
        self.shortcuts.clear()
        self.originals.clear()
        self.counter = 0


class ElementConverter:
    """Swiss army knife for a single formatting element."""

    def __init__(
        self,
        pattern: str,
        shortcut_name: str,
        text_group: int,
        extra_group: int = 0,
        left: str | None = None,
        right: str | None = None,
    ) -> None:
        """Compile forward and reverse patterns.

        Args:
            pattern: Regular expression for original markup. Every part of the
                construct must sit in a numbered group.
            shortcut_name: Base shortcut tag name. Names containing a digit are
                used verbatim; others get an incrementing numeric suffix.
            text_group: Group holding enclosed text, ``0`` for self-closing
                constructs.
            extra_group: Group holding text to be translated separately,
                ``0`` for none.
            left: Opening literal used when wrapping a selection.
            right: Closing literal used when wrapping a selection.
        """
        self._pattern = re.compile(pattern)
        self.shortcut_name = shortcut_name
        self.text_group = text_group
        self.extra_group = extra_group
        self.left = left
        self.right = right
        self.use_counter = _DIGIT.search(shortcut_name) is None
        self._state = ConverterState()

        name = re.escape(shortcut_name)
        if self.use_counter:
            name += r"\d+"
        if text_group > 0:
            reverse = rf"(<({name})>)(.+?)(</\2>)"
        else:
            reverse = rf"(<{name}/>)"
        self._reverse_pattern = re.compile(reverse)

    @property
    def is_self_closing(self) -> bool:
        return self.text_group == 0

    @property
    def originals(self) -> Mapping[str, str]:
        """Shortcut literal -> original bracket text registered so far."""
        return dict(self._state.originals)

    def to_shortcuts(self, text: str, extras: MutableMapping[str, str]) -> str:
        """Substitute formatting elements with shortcut tags.

        Extra strings to be translated as separate segments go to *extras*,
        keyed by shortcut name.

        Args:
            text: Text to be processed.
            extras: Extra strings container, updated in place.

        Returns:
            Processed text, or *text* itself when nothing matched.
        """
        parts: list[str] = []
        last_position = 0
        matched = False

        for match in self._pattern.finditer(text):
            matched = True
            parts.append(text[last_position : match.start()])
            last_position = match.end()
            parts.append(self._substitute(match, extras))

        if not matched:
            return text

        parts.append(text[last_position:])
        return "".join(parts)

    def _substitute(
        self, match: re.Match[str], extras: MutableMapping[str, str]
    ) -> str:
        first_parts: list[str] = []
        last_parts: list[str] = []
        enclosed = ""
        extra_text: str | None = None
        before_text = True

        for i in range(1, self._pattern.groups + 1):
            group = match.group(i) or ""
            if i == self.extra_group:
                extra_text = group
            if i == self.text_group:
                before_text = False
                enclosed = group
                continue
            if before_text:
                first_parts.append(group)
            else:
                last_parts.append(group)

        first_label = "".join(first_parts)
        last_label = "".join(last_parts)

        # Key ignores enclosed text: identical brackets share one shortcut.
        label_key = first_label + _LABEL_SEPARATOR + last_label
        name = self._state.shortcuts.get(label_key)
        is_new = name is None
        if name is None:
            name = self._next_name()
            self._state.shortcuts[label_key] = name
            logger.debug("Allocated shortcut %s for %r", name, label_key)

        if extra_text is not None:
            extras[name] = extra_text

        if self.is_self_closing:
            opening = f"<{name}/>"
            closing = ""
        else:
            opening = f"<{name}>"
            closing = f"</{name}>"

        if is_new:
            self._state.originals[opening] = first_label
            if closing:
                self._state.originals[closing] = last_label

        return opening + enclosed + closing

    def to_original(self, text: str, extras: Mapping[str, str]) -> str:
        """Remove shortcuts and restore original formatting.

        Args:
            text: Piece of text where shortcuts should be removed.
            extras: Mapping of source extra strings to translated ones.

        Returns:
            Restored text. Unknown or unbalanced shortcuts are left as-is.
        """
        result = text
        for shortcut, original in self._state.originals.items():
            if shortcut not in result:
                continue
            replacement = original
            # Translate extras inside the bracket text before restoring it
            if self.extra_group > 0:
                for source, translated in extras.items():
                    if source:
                        replacement = replacement.replace(source, translated)
            result = result.replace(shortcut, replacement)
        return result

    def reset(self) -> None:
        """Forget all allocated shortcuts."""
        self._state.clear()

    def apply_original_formatting(self, text: str) -> str:
        """Wrap *text* with the element's literals if both are defined."""
        if self.left is not None and self.right is not None:
            return self.left + text + self.right
        return text

    def get_format_structure(
        self,
        text: str,
        find_original: bool,
        find_shortcuts: bool,
    ) -> list[FormatSpan]:
        """Report markup and shortcut occurrences without changing state.

        Spans carry no element; the caller knows which element this converter
        serves. When both scans run the result is not sorted.
        """
        result: list[FormatSpan] = []

        element = BlockType.FORMATTING_ELEMENT
        if find_original:
            for match in self._pattern.finditer(text):
                if self.is_self_closing:
                    result.append(_span(element, match.start(), match.end()))
                    continue
                text_start = match.start(self.text_group)
                text_end = match.end(self.text_group)
                result.append(_span(element, match.start(), text_start))
                result.append(_span(BlockType.TEXT, text_start, text_end))
                result.append(_span(element, text_end, match.end()))

        shortcut = BlockType.SHORTCUT
        if find_shortcuts:
            for match in self._reverse_pattern.finditer(text):
                result.append(_span(shortcut, match.start(1), match.end(1)))
                if self.is_self_closing:
                    continue
                result.append(_span(BlockType.TEXT, match.start(3), match.end(3)))
                result.append(_span(shortcut, match.start(4), match.end(4)))

        return result

    def _next_name(self) -> str:
        if not self.use_counter:
            return self.shortcut_name
        self._state.counter += 1
        return f"{self.shortcut_name}{self._state.counter}"


def _span(block_type: BlockType, begin: int, end: int) -> FormatSpan:
    return FormatSpan(block_type, None, begin, end)
