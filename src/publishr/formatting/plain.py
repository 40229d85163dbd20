"""Legacy "plain shortcuts" conversion.

Stateless token substitution kept for documents translated before numbered
shortcuts and extra strings existed.  Every recognised token chain maps to
a fixed row of tags, so the same markup always yields the same tags.
"""

from __future__ import annotations

import re

# In-text control symbol patterns. Each group is one token. Order matters.
TAG_PATTERNS: tuple[re.Pattern[str], ...] = (
    # Emphasis pairs
    re.compile(r"(?<!\*)(\*{3})(?!\*)(?:.*?)(?<!\*)(\*{3})(?!\*)"),
    re.compile(r"(?<!\*)(\*{2})(?!\*)(?:.*?)(?<!\*)(\*{2})(?!\*)"),
    re.compile(r"(?<!\*)(\*{1})(?!\*)(?:.*?)(?<!\*)(\*{1})(?!\*)"),
    re.compile(r"(?<!\*)(\*{1,3})(?!\*)"),  # Single emphasis of any type
    re.compile(r"(~)(?:[^~]+)(~)"),  # Subscript
    re.compile(r"(\^)(?:[^\^]+)(\^)"),  # Superscript
    re.compile(r"(\[\^).+?(\])"),  # Footnote
    re.compile(r"(name\()(?:[^\)]+)(\))"),  # Name wrapper
    re.compile(r"(title\()(?:[^\)]+)(\))"),  # Title wrapper
    re.compile(r"(\|)"),  # Table column
    re.compile(r"(!?\[)(?:[^\]]*)(\]\()(?:[^\)]+)(\))"),  # Image/link
)

# (tokens, tags) rows; a row has as many tags as tokens.
TAG_TABLE: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("*",), ("<e1/>",)),  # single light emphasis
    (("**",), ("<e2/>",)),  # single strong emphasis
    (("***",), ("<e3/>",)),  # single combined emphasis
    (("*", "*"), ("<e1>", "</e1>")),  # light emphasis pair
    (("**", "**"), ("<e2>", "</e2>")),  # strong emphasis pair
    (("***", "***"), ("<e3>", "</e3>")),  # combined emphasis pair
    (("|",), ("<s1/>",)),  # table column separator
    (("^", "^"), ("<sup1>", "</sup1>")),  # superscript
    (("~", "~"), ("<sub1>", "</sub1>")),  # subscript
    (("[^", "]"), ("<fn1>", "</fn1>")),  # footnote
    (("name(", ")"), ("<n1>", "</n1>")),  # name wrapper
    (("title(", ")"), ("<t1>", "</t1>")),  # title wrapper
    (("![", "](", ")"), ("<id1>", "</id1><il1>", "</il1>")),  # image
    (("[", "](", ")"), ("<ld1>", "</ld1><la1>", "</la1>")),  # link
)


class PlainShortcutConverter:
    """Table-driven converter between markup tokens and legacy tags."""

    def __init__(
        self,
        patterns: tuple[re.Pattern[str], ...] = TAG_PATTERNS,
        table: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = TAG_TABLE,
    ) -> None:
        self._patterns = patterns
        self._tag_to_token: dict[str, str] = {}
        self._tokens_to_tags: dict[tuple[str, ...], tuple[str, ...]] = {}
        for tokens, tags in table:
            if len(tokens) != len(tags):
                msg = f"Token/tag count mismatch in row {tokens!r} -> {tags!r}"
                raise ValueError(msg)
            self._tokens_to_tags[tokens] = tags
            for token, tag in zip(tokens, tags, strict=True):
                self._tag_to_token[tag] = token

    def to_shortcuts(self, text: str) -> str:
        """Replace markup tokens with legacy tags, pattern by pattern."""
        result = text
        for pattern in self._patterns:
            result = self._replace_with_tags(result, pattern)
        return result

    def to_original(self, text: str) -> str:
        """Replace every legacy tag in *text* with its token."""
        result = text
        for tag, token in self._tag_to_token.items():
            result = result.replace(tag, token)
        return result

    def _replace_with_tags(self, text: str, pattern: re.Pattern[str]) -> str:
        parts: list[str] = []
        last_position = 0
        for match in pattern.finditer(text):
            tags = self._tokens_to_tags.get(match.groups())
            if tags is None:
                # Unknown token chain: leave the match untouched
                continue
            for i, tag in enumerate(tags, start=1):
                parts.append(text[last_position : match.start(i)])
                parts.append(tag)
                last_position = match.end(i)
        if last_position == 0:
            return text
        parts.append(text[last_position:])
        return "".join(parts)
