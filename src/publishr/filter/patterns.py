"""Line-level patterns of the PublishR syntax.

See kramdown syntax at https://kramdown.gettalong.org/syntax.html for the
constructs this dialect borrows.

Skip patterns mark lines that are never translated.  Block patterns (two
groups: prefix, remainder) peel block-level markers off the start of a
line; they can stack, e.g. indentation followed by a list marker.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# Escaped asterisks are swapped for this token before inline conversion
ESCAPED_ASTERISK = "\\*"
ESCAPED_ASTERISK_PLACEHOLDER = "<$@EA@$>"

# Inline footnote declarations typed by the translator: <ef>text</ef>
EXTRA_FOOTNOTE_TAGNAME = "ef"
EXTRA_FOOTNOTE_PATTERN = re.compile(
    rf"(<{EXTRA_FOOTNOTE_TAGNAME}>)(.+?)(</{EXTRA_FOOTNOTE_TAGNAME}>)"
)
EXTRA_FOOTNOTE_LABEL = "[^{prefix}-{number}]"


class AnnotationKind(Enum):
    """Block-level formatting that can apply to a line."""

    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    FOOTNOTE = "footnote"
    LINE_NUMBER = "line_number"
    TABLE = "table"
    END_OF_BLOCK = "end_of_block"


_DESCRIPTIONS: dict[AnnotationKind, str] = {
    AnnotationKind.HEADING: "Heading level {detail}",
    AnnotationKind.BLOCKQUOTE: "Block quote level {detail}",
    AnnotationKind.LIST: "List item {detail}",
    AnnotationKind.FOOTNOTE: "Footnote {detail}",
    AnnotationKind.LINE_NUMBER: "Line {detail}",
    AnnotationKind.TABLE: "Table",
    AnnotationKind.END_OF_BLOCK: "End of block",
}


@dataclass(frozen=True, slots=True)
class FormattingAnnotation:
    """Human-readable context for translators. Never part of the output."""

    kind: AnnotationKind
    detail: str = ""

    def describe(self) -> str:
        return _DESCRIPTIONS[self.kind].format(detail=self.detail)


@dataclass(frozen=True, slots=True)
class LinePattern:
    """A full-line pattern with an optional annotation builder."""

    pattern: re.Pattern[str]
    annotate: Callable[[re.Match[str]], FormattingAnnotation] | None = None

    def match(self, line: str) -> re.Match[str] | None:
        return self.pattern.fullmatch(line)


def _heading(match: re.Match[str]) -> FormattingAnnotation:
    return FormattingAnnotation(AnnotationKind.HEADING, str(match.group(1).count("#")))


def _list_item(match: re.Match[str]) -> FormattingAnnotation:
    return FormattingAnnotation(AnnotationKind.LIST, match.group(1).strip())


def _blockquote(match: re.Match[str]) -> FormattingAnnotation:
    depth = match.group(1).count(">")
    return FormattingAnnotation(AnnotationKind.BLOCKQUOTE, str(depth))


def _footnote(match: re.Match[str]) -> FormattingAnnotation:
    return FormattingAnnotation(AnnotationKind.FOOTNOTE, match.group(1).rstrip()[:-1])


def _line_number(match: re.Match[str]) -> FormattingAnnotation:
    number = match.group(1).strip()[1:-1]
    return FormattingAnnotation(AnnotationKind.LINE_NUMBER, number)


# Non-translatable lines
SKIP_PATTERNS: tuple[LinePattern, ...] = (
    LinePattern(  # Table separator line
        re.compile(r"[\|\-\+:= ]+"),
        lambda _match: FormattingAnnotation(AnnotationKind.TABLE),
    ),
    LinePattern(re.compile(r"\{\:.+\}\s*")),  # Comment/command line
    LinePattern(  # End of block marker
        re.compile(r"\^\s*"),
        lambda _match: FormattingAnnotation(AnnotationKind.END_OF_BLOCK),
    ),
)

# Block-level prefixes (2 groups)
BLOCK_PATTERNS: tuple[LinePattern, ...] = (
    LinePattern(re.compile(r"(\s+)(.+)")),  # Indentation
    LinePattern(re.compile(r"(#+\**\s)(.+)"), _heading),
    LinePattern(re.compile(r"((?:\*|\d+.)\s)(.+)"), _list_item),
    LinePattern(re.compile(r"((?:>+\s*)+)(.*)"), _blockquote),
    LinePattern(re.compile(r"(\[\^.+?\]\:\s+)(.+)"), _footnote),
    LinePattern(re.compile(r"(\[\d+\]\s+)(.+)"), _line_number),
)
