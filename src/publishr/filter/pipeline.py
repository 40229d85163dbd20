"""PublishR document filter.

Processes a document one line at a time:

1. Blank and non-translatable lines pass through unchanged.
2. Block-level prefixes (indentation, headings, lists, quotes, footnote
   definitions, line numbers) are written out literally.
3. Escaped asterisks are protected, inline markup becomes shortcut tags,
   and the shortcut text is handed to the translation callback together
   with extra strings (URLs) as separate units.
4. Translated text is restored to markup; ``<ef>...</ef>`` declarations
   become ``[^omegat-N]`` references whose definitions are appended after
   the last line.

A run either completes or raises; output is only produced for complete
documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from publishr.config import get_settings
from publishr.filter.linebreaks import split_lines
from publishr.filter.patterns import (
    BLOCK_PATTERNS,
    ESCAPED_ASTERISK,
    ESCAPED_ASTERISK_PLACEHOLDER,
    EXTRA_FOOTNOTE_LABEL,
    EXTRA_FOOTNOTE_PATTERN,
    SKIP_PATTERNS,
    AnnotationKind,
    FormattingAnnotation,
)
from publishr.formatting.formatter import Formatter
from publishr.formatting.plain import PlainShortcutConverter

if TYPE_CHECKING:
    import re
    from collections.abc import Callable, Iterable, Mapping
    from typing import TextIO

    from publishr.config import FilterConfig

    TranslateFn = Callable[[str, str | None], str]

logger = logging.getLogger(__name__)

DEFAULT_LINEBREAK = "\n"


class TranslationError(RuntimeError):
    """The translation callback failed; the document run is aborted."""

    def __init__(self, line_number: int, unit: str) -> None:
        super().__init__(f"Translation failed at line {line_number}: {unit!r}")
        self.line_number = line_number
        self.unit = unit


@dataclass
class _DocumentState:
    """Cross-line state of one document run."""

    plain_shortcuts: bool
    footnote_label: str
    footnotes: list[tuple[str, str]] = field(default_factory=list)
    annotations: dict[AnnotationKind, FormattingAnnotation] = field(
        default_factory=dict
    )
    line_number: int = 0
    linebreak: str = ""
    open_last_line: bool = False


class ShortcutFilter:
    """Line pipeline between PublishR markup and translatable shortcut text.

    One instance processes one document at a time; shortcut state is reset
    at the start of every run.
    """

    def __init__(
        self,
        config: FilterConfig | None = None,
        formatter: Formatter | None = None,
    ) -> None:
        """Create a filter.

        Args:
            config: Filter configuration. Read from ``get_settings()`` at the
                start of each run when omitted.
            formatter: Formatter to use; a fresh one by default.
        """
        self._config = config
        self.formatter = formatter or Formatter()
        self._plain = PlainShortcutConverter()

    def process_text(self, text: str, translate: TranslateFn) -> str:
        """Translate a whole document held in memory."""
        return "".join(self.process_lines(split_lines(text), translate))

    def process_file(
        self, reader: TextIO, writer: TextIO, translate: TranslateFn
    ) -> None:
        """Translate *reader* into *writer*. Nothing is written on failure."""
        output = self.process_text(reader.read(), translate)
        writer.write(output)

    def process_lines(
        self,
        lines: Iterable[tuple[str, str]],
        translate: TranslateFn,
    ) -> list[str]:
        """Translate ``(line, linebreak)`` pairs.

        Returns:
            Output chunks in order: one per input line (with its linebreak),
            followed by collected footnote definitions.

        Raises:
            TranslationError: If the callback raises for any unit.
        """
        state = self._start_document()
        output: list[str] = []

        for line, linebreak in lines:
            state.line_number += 1
            if linebreak:
                state.linebreak = linebreak
            state.open_last_line = not linebreak
            output.append(self._process_line(line, state, translate) + linebreak)

        output.extend(self._footnote_definitions(state))
        logger.debug(
            "Document processed: %d line(s), %d extra footnote(s)",
            state.line_number,
            len(state.footnotes),
        )
        return output

    def _start_document(self) -> _DocumentState:
        config = self._config if self._config is not None else get_settings().filter
        self.formatter.reset_converters()
        return _DocumentState(
            plain_shortcuts=config.plain_shortcuts,
            footnote_label=config.footnote_label,
        )

    def _process_line(
        self,
        line: str,
        state: _DocumentState,
        translate: TranslateFn,
    ) -> str:
        # Annotations do not span blank lines
        if not line.strip():
            state.annotations.clear()
            return line

        for skip in SKIP_PATTERNS:
            match = skip.match(line)
            if match is not None:
                _record(state, skip.annotate, match)
                logger.debug("Line %d skipped", state.line_number)
                return line

        # Trim block-level tokens; restart from the first pattern after a hit
        prefix: list[str] = []
        i = 0
        while i < len(BLOCK_PATTERNS):
            block = BLOCK_PATTERNS[i]
            i += 1
            match = block.match(line)
            if match is not None:
                prefix.append(match.group(1))
                line = match.group(2)
                _record(state, block.annotate, match)
                i = 0

        if not line.strip():
            return "".join(prefix) + line

        return "".join(prefix) + self._translate_inline(line, state, translate)

    def _translate_inline(
        self,
        text: str,
        state: _DocumentState,
        translate: TranslateFn,
    ) -> str:
        # Temporarily replace escaped asterisks to reduce regexp madness
        text = text.replace(ESCAPED_ASTERISK, ESCAPED_ASTERISK_PLACEHOLDER)

        source_extras: dict[str, str] = {}
        if state.plain_shortcuts:
            text = self._plain.to_shortcuts(text)
        else:
            text = self.formatter.to_shortcuts(text, source_extras)

        text = _unescape(text)

        # Captured extras may still hold tags of earlier elements and
        # placeholders; translators see them as plain markup.
        readable = {
            extra: _unescape(self.formatter.to_original(extra, {}))
            for extra in dict.fromkeys(source_extras.values())
        }
        comment = build_comment(
            state.annotations.values(),
            {name: readable[extra] for name, extra in source_extras.items()},
        )
        translated = _call(translate, text, comment, state)

        if state.plain_shortcuts:
            restored = self._plain.to_original(translated)
        else:
            # Extras are matched back by source value, not by shortcut name
            target_extras: dict[str, str] = {}
            for extra, shown in readable.items():
                target_extras[extra] = _call(translate, shown, None, state)
            restored = self.formatter.to_original(translated, target_extras)

        # Bracket text is registered with placeholders in place
        restored = _unescape(restored)
        return self._externalize_footnotes(restored, state)

    def _externalize_footnotes(self, text: str, state: _DocumentState) -> str:
        def _replace(match: re.Match[str]) -> str:
            label = EXTRA_FOOTNOTE_LABEL.format(
                prefix=state.footnote_label,
                number=len(state.footnotes) + 1,
            )
            state.footnotes.append((label, match.group(2)))
            logger.debug("Line %d: extra footnote %s", state.line_number, label)
            return label

        return EXTRA_FOOTNOTE_PATTERN.sub(_replace, text)

    @staticmethod
    def _footnote_definitions(state: _DocumentState) -> list[str]:
        if not state.footnotes:
            return []
        linebreak = state.linebreak or DEFAULT_LINEBREAK
        chunks: list[str] = []
        if state.open_last_line:
            chunks.append(linebreak)
        for label, text in state.footnotes:
            chunks.append(linebreak)
            chunks.append(f"{label}: {text}{linebreak}")
        return chunks


def build_comment(
    annotations: Iterable[FormattingAnnotation],
    extras: Mapping[str, str],
) -> str | None:
    """Assemble translator context from block annotations and extra strings."""
    lines = [annotation.describe() for annotation in annotations]
    lines.extend(f"<{name}>: {extra}" for name, extra in extras.items())
    return "\n".join(lines) if lines else None


def extract_segments(text: str, config: FilterConfig | None = None) -> list[str]:
    """Return the translation units a run over *text* would produce, in order."""
    segments: list[str] = []

    def _record_segment(segment: str, _comment: str | None) -> str:
        segments.append(segment)
        return segment

    ShortcutFilter(config).process_text(text, _record_segment)
    return segments


def _unescape(text: str) -> str:
    return text.replace(ESCAPED_ASTERISK_PLACEHOLDER, ESCAPED_ASTERISK)


def _record(
    state: _DocumentState,
    annotate: Callable[[re.Match[str]], FormattingAnnotation] | None,
    match: re.Match[str],
) -> None:
    if annotate is None:
        return
    annotation = annotate(match)
    state.annotations[annotation.kind] = annotation


def _call(
    translate: TranslateFn,
    text: str,
    comment: str | None,
    state: _DocumentState,
) -> str:
    try:
        return translate(text, comment)
    except Exception as exc:
        raise TranslationError(state.line_number, text) from exc
