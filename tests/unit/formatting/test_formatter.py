"""Tests for the ordered formatter and its structural scan."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from publishr.formatting.elements import BlockType, ElementKind

if TYPE_CHECKING:
    from publishr.formatting.formatter import Formatter
    from publishr.formatting.spans import FormatSpan

FE = BlockType.FORMATTING_ELEMENT
SC = BlockType.SHORTCUT
TX = BlockType.TEXT


def _layout(
    spans: list[FormatSpan],
) -> list[tuple[BlockType, ElementKind | None, int, int]]:
    return [(s.block_type, s.element, s.begin, s.end) for s in spans]


class TestConversionOrder:
    """Converters run in a fixed order."""

    def test_iteration_order(self, formatter: Formatter) -> None:
        """Strong comes before emphasis; link is last."""
        assert [kind for kind, _ in formatter] == [
            ElementKind.STRONG,
            ElementKind.EMPHASIS,
            ElementKind.FOOTNOTE,
            ElementKind.SEPARATOR,
            ElementKind.SUPERSCRIPT,
            ElementKind.SUBSCRIPT,
            ElementKind.NAME,
            ElementKind.TITLE,
            ElementKind.IMAGE,
            ElementKind.LINK,
        ]

    def test_strong_consumed_before_emphasis(self, formatter: Formatter) -> None:
        """Nested emphasis inside strong emphasis."""
        assert formatter.to_shortcuts("**a*b*c**", {}) == "<e2>a<e1>b</e1>c</e2>"

    def test_image_is_not_taken_for_a_link(self, formatter: Formatter) -> None:
        """The image converter runs before the link converter."""
        extras: dict[str, str] = {}
        text = "See ![alt](pic.png) and [t](http://u)."
        result = formatter.to_shortcuts(text, extras)
        assert result == "See <i1>alt</i1> and <a1>t</a1>."
        assert extras == {"a1": "http://u"}


class TestToShortcuts:
    """Inline conversion of whole strings."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            (
                "Let's **try** some *formatting*.",
                "Let's <e2>try</e2> some <e1>formatting</e1>.",
            ),
            ("Water's H~2~O.", "Water's H<s3>2</s3>O."),
            ("1^st^ and 2^nd^", "1<s2>st</s2> and 2<s2>nd</s2>"),
            (
                "name(Philip K. Dick) wrote title(Ubik).",
                "<n1>Philip K. Dick</n1> wrote <t1>Ubik</t1>.",
            ),
            ("| a | b", "<s1/> a <s1/> b"),
            (r"a \| b | c", r"a \| b <s1/> c"),
            (r"a \*b* c", r"a \*b* c"),
            ("not * emphasis *", "not * emphasis *"),
        ],
    )
    def test_examples(self, formatter: Formatter, text: str, expected: str) -> None:
        """Markup becomes numbered or verbatim shortcut tags."""
        assert formatter.to_shortcuts(text, {}) == expected

    def test_reset_converters(self, formatter: Formatter) -> None:
        """Resetting starts numbering again."""
        assert formatter.to_shortcuts("a[^x] b[^y]", {}) == "a<f1/> b<f2/>"
        formatter.reset_converters()
        assert formatter.to_shortcuts("c[^y]", {}) == "c<f1/>"

    def test_state_spans_lines(self, formatter: Formatter) -> None:
        """Without a reset, later lines continue the numbering."""
        formatter.to_shortcuts("a[^x]", {})
        assert formatter.to_shortcuts("b[^y] c[^x]", {}) == "b<f2/> c<f1/>"


class TestToOriginal:
    """Restoring markup."""

    @pytest.mark.parametrize(
        "text",
        [
            "Single ***combined, strong** and ligh*t emphasis.",
            "Refer to a wise book[^wise-book] and | name(Ann) ~2~ ^3^",
            "Here is an image ![Image description](image1.jpg).",
            "And here is a link [Link description](http://first.url).",
        ],
    )
    def test_round_trip(self, formatter: Formatter, text: str) -> None:
        """Unchanged shortcut text restores the original line."""
        extras: dict[str, str] = {}
        shortcuts = formatter.to_shortcuts(text, extras)
        identity = {extra: extra for extra in extras.values()}
        assert formatter.to_original(shortcuts, identity) == text

    def test_translated_line(self, formatter: Formatter) -> None:
        """Translated text and extras are reassembled into markup."""
        extras: dict[str, str] = {}
        shortcuts = formatter.to_shortcuts(
            "Read **this** [page](http://en.example).", extras
        )
        assert shortcuts == "Read <e2>this</e2> <a1>page</a1>."
        restored = formatter.to_original(
            "Lisez <a1>cette page</a1> <e2>ici</e2>.",
            {"http://en.example": "http://fr.example"},
        )
        assert restored == "Lisez [cette page](http://fr.example) **ici**."

    @pytest.mark.parametrize(
        ("text", "shortcuts", "extra"),
        [
            (
                "[page](http://x.org/~a/~b)",
                "<a1>page</a1>",
                "http://x.org/<s3>a/</s3>b",
            ),
            ("[there](http://x.org/a|b)", "<a1>there</a1>", "http://x.org/a<s1/>b"),
        ],
    )
    def test_earlier_elements_inside_bracket_text(
        self, formatter: Formatter, text: str, shortcuts: str, extra: str
    ) -> None:
        """Tags of earlier elements inside restored brackets are expanded too."""
        extras: dict[str, str] = {}
        assert formatter.to_shortcuts(text, extras) == shortcuts
        assert extras == {"a1": extra}
        assert formatter.to_original(shortcuts, {}) == text
        assert formatter.to_original(extra, {}) in text


class TestApplyElement:
    """Wrapping a selection with an element's brackets."""

    @pytest.mark.parametrize(
        ("element", "expected"),
        [
            (ElementKind.STRONG, "**word**"),
            (ElementKind.EMPHASIS, "*word*"),
            (ElementKind.SUPERSCRIPT, "^word^"),
            (ElementKind.SUBSCRIPT, "~word~"),
            (ElementKind.NAME, "name(word)"),
            (ElementKind.TITLE, "title(word)"),
            (ElementKind.LINK, "word"),
            (ElementKind.FOOTNOTE, "word"),
        ],
    )
    def test_apply(
        self, formatter: Formatter, element: ElementKind, expected: str
    ) -> None:
        """Elements without literals leave the selection unchanged."""
        assert formatter.apply_element("word", element) == expected


class TestParseStructure:
    """Per-character structural layout."""

    def test_empty_text(self, formatter: Formatter) -> None:
        """Nothing to scan yields nothing."""
        assert formatter.parse_structure("") == []

    def test_nothing_requested(self, formatter: Formatter) -> None:
        """Disabling both scans yields nothing."""
        assert formatter.parse_structure("**a**", False, False) == []

    def test_gaps_are_plain_text(self, formatter: Formatter) -> None:
        """Unowned runs appear as element-less text spans."""
        spans = formatter.parse_structure("Let's **try** it")
        assert _layout(spans) == [
            (TX, None, 0, 6),
            (FE, ElementKind.STRONG, 6, 8),
            (TX, ElementKind.STRONG, 8, 11),
            (FE, ElementKind.STRONG, 11, 13),
            (TX, None, 13, 16),
        ]

    def test_spans_are_contiguous(self, formatter: Formatter) -> None:
        """Spans tile the text without gaps or overlaps."""
        text = "A *b* | [c](http://d) and H~2~O[^n]"
        spans = formatter.parse_structure(text)
        assert spans[0].begin == 0
        assert spans[-1].end == len(text)
        for previous, current in zip(spans, spans[1:], strict=False):
            assert previous.end == current.begin

    def test_strong_markers_hidden_from_emphasis(self, formatter: Formatter) -> None:
        """Emphasis does not claim the asterisks of strong emphasis."""
        spans = formatter.parse_structure("**bold**")
        assert _layout(spans) == [
            (FE, ElementKind.STRONG, 0, 2),
            (TX, ElementKind.STRONG, 2, 6),
            (FE, ElementKind.STRONG, 6, 8),
        ]

    def test_nested_element_claims_interior_text(self, formatter: Formatter) -> None:
        """Later elements take over text owned by earlier ones."""
        spans = formatter.parse_structure("**a *b* c**")
        assert _layout(spans) == [
            (FE, ElementKind.STRONG, 0, 2),
            (TX, ElementKind.STRONG, 2, 4),
            (FE, ElementKind.EMPHASIS, 4, 5),
            (TX, ElementKind.EMPHASIS, 5, 6),
            (FE, ElementKind.EMPHASIS, 6, 7),
            (TX, ElementKind.STRONG, 7, 9),
            (FE, ElementKind.STRONG, 9, 11),
        ]

    def test_separator_inside_strong(self, formatter: Formatter) -> None:
        """A self-closing element splits the enclosing text run."""
        spans = formatter.parse_structure("**a|b**")
        assert _layout(spans) == [
            (FE, ElementKind.STRONG, 0, 2),
            (TX, ElementKind.STRONG, 2, 3),
            (FE, ElementKind.SEPARATOR, 3, 4),
            (TX, ElementKind.STRONG, 4, 5),
            (FE, ElementKind.STRONG, 5, 7),
        ]

    def test_shortcut_tags(self, formatter: Formatter) -> None:
        """Shortcut scans classify tags as shortcuts."""
        spans = formatter.parse_structure("x <e1>y</e1>", False, True)
        assert _layout(spans) == [
            (TX, None, 0, 2),
            (SC, ElementKind.EMPHASIS, 2, 6),
            (TX, ElementKind.EMPHASIS, 6, 7),
            (SC, ElementKind.EMPHASIS, 7, 12),
        ]

    def test_scan_does_not_allocate(self, formatter: Formatter) -> None:
        """Structural scans leave shortcut numbering untouched."""
        formatter.parse_structure("a[^x]")
        assert formatter.to_shortcuts("b[^y]", {}) == "b<f1/>"
