"""Tests for the inline scan, break handling and AST build.

Uses explicit rule tables so each test controls which rules run.
"""

from __future__ import annotations

import pytest

from subtilde.config import ParseConfig, parse_config_context
from subtilde.location import SourceLocation
from subtilde.nodes import (
    Emphasis,
    LineBreak,
    SoftBreak,
    Strikethrough,
    Strong,
    Subscript,
    Text,
)
from subtilde.parsing.inline.core import InlineParser, _content_end
from subtilde.parsing.inline.rules import CORE_INLINE_RULES, EmphasisRule
from subtilde.parsing.inline.tokens import (
    DelimiterToken,
    HardBreakToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)
from subtilde.parsing.line import LineBuffer, decode_line
from subtilde.plugins.strikethrough import STRIKETHROUGH_PRIORITY, StrikethroughRule
from subtilde.plugins.subscript import SUBSCRIPT_PRIORITY, SubscriptRule

STRIKE_RULES = CORE_INLINE_RULES.with_rule(StrikethroughRule(), STRIKETHROUGH_PRIORITY)
SUB_RULES = CORE_INLINE_RULES.with_rule(SubscriptRule(), SUBSCRIPT_PRIORITY)
ALL_RULES = STRIKE_RULES.with_rule(SubscriptRule(), SUBSCRIPT_PRIORITY)


def loc(col: int, end: int, lineno: int = 1) -> SourceLocation:
    return SourceLocation(lineno=lineno, col_offset=col, end_col_offset=end)


class TestTokenize:
    """Phase one output."""

    def test_emphasis_runs(self) -> None:
        tokens = InlineParser(CORE_INLINE_RULES).tokenize("*a*")
        assert [type(t) for t in tokens] == [DelimiterToken, TextToken, DelimiterToken]
        opener, _, closer = tokens
        assert (opener.can_open, opener.can_close) == (True, False)
        assert (closer.can_open, closer.can_close) == (False, True)

    def test_subscript_is_complete_node(self) -> None:
        tokens = InlineParser(SUB_RULES).tokenize("H~2~O")
        assert [type(t) for t in tokens] == [TextToken, NodeToken, TextToken]
        assert isinstance(tokens[1].node, Subscript)

    def test_soft_break(self) -> None:
        tokens = InlineParser(CORE_INLINE_RULES).tokenize("a\nb")
        assert [type(t) for t in tokens] == [TextToken, SoftBreakToken, TextToken]

    @pytest.mark.parametrize("source", ["a  \nb", "a   \nb", "a\\\nb"])
    def test_hard_break(self, source: str) -> None:
        tokens = InlineParser(CORE_INLINE_RULES).tokenize(source)
        assert [type(t) for t in tokens] == [TextToken, HardBreakToken, TextToken]
        assert tokens[0].content == "a"

    def test_single_trailing_space_is_dropped(self) -> None:
        tokens = InlineParser(CORE_INLINE_RULES).tokenize("a \nb")
        assert tokens[0].content == "a"
        assert isinstance(tokens[1], SoftBreakToken)

    def test_unclaimed_trigger_becomes_text(self) -> None:
        tokens = InlineParser(SUB_RULES).tokenize("a ~b")
        assert tokens == [
            TextToken("a ", loc(0, 2)),
            TextToken("~", loc(2, 3)),
            TextToken("b", loc(3, 4)),
        ]

    def test_non_trigger_tilde_stays_in_text(self) -> None:
        tokens = InlineParser(CORE_INLINE_RULES).tokenize("a~b~c")
        assert tokens == [TextToken("a~b~c", loc(0, 5))]


class TestContentEnd:
    """Where a non-final line stops."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("abc", (3, False)),
            ("abc ", (3, False)),
            ("abc  ", (3, True)),
            ("abc\\", (3, True)),
            ("abc\\\\", (4, False)),
            ("", (0, False)),
        ],
    )
    def test_content_end(self, raw: str, expected: tuple[int, bool]) -> None:
        assert _content_end(decode_line(raw)) == expected


class TestBuild:
    """AST shapes."""

    def test_plain_text(self) -> None:
        assert InlineParser(CORE_INLINE_RULES).parse("hello") == (Text(location=loc(0, 5), content="hello"),)

    def test_empty(self) -> None:
        assert InlineParser(ALL_RULES).parse("") == ()

    def test_declined_tildes_merge_into_one_text(self) -> None:
        assert InlineParser(STRIKE_RULES).parse("a ~~~ b") == (Text(location=loc(0, 7), content="a ~~~ b"),)

    def test_subscript_locations(self) -> None:
        text_h, sub, text_o = InlineParser(SUB_RULES).parse("H~2~O")
        assert text_h == Text(location=loc(0, 1), content="H")
        assert sub == Subscript(location=loc(1, 4), children=(Text(location=loc(2, 3), content="2"),))
        assert text_o == Text(location=loc(4, 5), content="O")

    def test_subscript_after_escape_uses_raw_columns(self) -> None:
        _, sub, _ = InlineParser(SUB_RULES).parse("\\*~2~x")
        assert sub.location == loc(3, 6)
        assert sub.children[0].location == loc(4, 5)

    def test_emphasis(self) -> None:
        (node,) = InlineParser(CORE_INLINE_RULES).parse("*a*")
        assert isinstance(node, Emphasis)
        assert node.children == (Text(location=loc(1, 2), content="a"),)

    def test_strong(self) -> None:
        (node,) = InlineParser(CORE_INLINE_RULES).parse("__a__")
        assert isinstance(node, Strong)

    def test_triple_run_nests_strong_in_emphasis(self) -> None:
        (node,) = InlineParser(CORE_INLINE_RULES).parse("***x***")
        assert isinstance(node, Emphasis)
        (inner,) = node.children
        assert isinstance(inner, Strong)
        assert inner.children == (Text(location=loc(3, 4), content="x"),)

    def test_strikethrough(self) -> None:
        (node,) = InlineParser(STRIKE_RULES).parse("~~x~~")
        assert isinstance(node, Strikethrough)

    def test_subscript_inside_strong(self) -> None:
        (node,) = InlineParser(ALL_RULES).parse("**C~6~**")
        assert isinstance(node, Strong)
        text, sub = node.children
        assert text.content == "C"
        assert isinstance(sub, Subscript)

    def test_unmatched_opener_kept_as_text(self) -> None:
        assert InlineParser(CORE_INLINE_RULES).parse("**a") == (Text(location=loc(0, 3), content="**a"),)

    def test_leftover_opener_characters(self) -> None:
        first, second = InlineParser(CORE_INLINE_RULES).parse("**a*")
        assert first.content == "*"
        assert isinstance(second, Emphasis)


class TestBreaks:
    """Line handling."""

    def test_soft_break_node(self) -> None:
        a, brk, b = InlineParser(CORE_INLINE_RULES).parse("a\n  b")
        assert a == Text(location=loc(0, 1), content="a")
        assert brk == SoftBreak(location=loc(1, 1))
        assert b == Text(location=loc(2, 3, lineno=2), content="b")

    def test_hard_break_node(self) -> None:
        _, brk, _ = InlineParser(CORE_INLINE_RULES).parse("a  \nb")
        assert brk == LineBreak(location=loc(1, 3))

    def test_emphasis_spans_lines(self) -> None:
        (node,) = InlineParser(CORE_INLINE_RULES).parse("*a\nb*")
        assert isinstance(node, Emphasis)
        assert [type(c) for c in node.children] == [Text, SoftBreak, Text]

    def test_subscript_never_spans_lines(self) -> None:
        nodes = InlineParser(SUB_RULES).parse("a~b\nc~d")
        assert not any(isinstance(n, Subscript) for n in nodes)

    def test_continuation_indent_blocks_subscript(self) -> None:
        nodes = InlineParser(SUB_RULES).parse("a\n ~2~")
        assert nodes[-1] == Text(location=loc(1, 4, lineno=2), content="~2~")


class TestRules:
    """Rules offered a LineBuffer directly."""

    def test_emphasis_consumes_whole_run(self) -> None:
        match = EmphasisRule().parse(LineBuffer(decode_line("**a"), 0))
        assert match.consumed == 2
        assert match.token.run_length == 2

    def test_strikethrough_accepts_one_or_two(self) -> None:
        rule = StrikethroughRule()
        assert rule.parse(LineBuffer(decode_line("a~b"), 1)).consumed == 1
        assert rule.parse(LineBuffer(decode_line("a~~b"), 1)).consumed == 2

    def test_strikethrough_declines_long_run(self) -> None:
        assert StrikethroughRule().parse(LineBuffer(decode_line("a~~~b"), 1)) is None

    def test_strikethrough_declines_after_tilde(self) -> None:
        assert StrikethroughRule().parse(LineBuffer(decode_line("a~~b"), 2)) is None

    def test_subscript_declines_at_line_start(self) -> None:
        assert SubscriptRule().parse(LineBuffer(decode_line("~2~"), 0)) is None


class TestParserConfig:
    """Rule table selection."""

    def test_default_rules_follow_active_config(self) -> None:
        with parse_config_context(ParseConfig(inline_rules=SUB_RULES)):
            parser = InlineParser()
        assert parser.rules is SUB_RULES

    def test_source_file_recorded(self) -> None:
        (node,) = InlineParser(CORE_INLINE_RULES, source_file="notes.md").parse("x")
        assert node.location.source_file == "notes.md"
        assert str(node.location) == "notes.md:1:0"

    def test_default_parser_handles_core_emphasis(self) -> None:
        nodes = InlineParser().parse("*hi* there")
        assert [type(node).__name__ for node in nodes] == ["Emphasis", "Text"]
        assert nodes[1] == Text(location=loc(4, 10), content=" there")
