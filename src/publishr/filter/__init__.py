"""Line-oriented PublishR document filter."""

from publishr.filter.linebreaks import split_lines
from publishr.filter.patterns import (
    EXTRA_FOOTNOTE_PATTERN,
    EXTRA_FOOTNOTE_TAGNAME,
    AnnotationKind,
    FormattingAnnotation,
)
from publishr.filter.pipeline import (
    ShortcutFilter,
    TranslationError,
    build_comment,
    extract_segments,
)

__all__ = [
    "EXTRA_FOOTNOTE_PATTERN",
    "EXTRA_FOOTNOTE_TAGNAME",
    "AnnotationKind",
    "FormattingAnnotation",
    "ShortcutFilter",
    "TranslationError",
    "build_comment",
    "extract_segments",
    "split_lines",
]
