"""Line splitting that keeps each line's break sequence."""

from __future__ import annotations

import re

_LINE = re.compile(r"([^\r\n]*)(\r\n|\r|\n)")


def split_lines(text: str) -> list[tuple[str, str]]:
    """Split *text* into ``(line, linebreak)`` pairs.

    Joining every ``line + linebreak`` reproduces *text* exactly.  A final
    line without a terminator gets an empty linebreak; a trailing
    terminator does not produce an extra empty line.
    """
    result: list[tuple[str, str]] = []
    position = 0
    for match in _LINE.finditer(text):
        result.append((match.group(1), match.group(2)))
        position = match.end()
    if position < len(text):
        result.append((text[position:], ""))
    return result
