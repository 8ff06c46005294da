"""Inline parsing subsystem for subtilde.

Inline rules are looked up by trigger character in an InlineRuleTable and
tried in priority order. Emphasis and strikethrough runs are paired with
the CommonMark delimiter stack algorithm.
See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

The InlineParser itself lives in ``subtilde.parsing.inline.core``.

"""

from __future__ import annotations

from subtilde.parsing.inline.match_registry import DelimiterMatch, MatchRegistry
from subtilde.parsing.inline.rules import (
    CORE_INLINE_RULES,
    EmphasisRule,
    InlineMatch,
    InlineRule,
    InlineRuleTable,
    Prioritized,
)
from subtilde.parsing.inline.tokens import (
    DelimiterToken,
    HardBreakToken,
    InlineToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)

__all__ = [
    "CORE_INLINE_RULES",
    "DelimiterMatch",
    "DelimiterToken",
    "EmphasisRule",
    "HardBreakToken",
    "InlineMatch",
    "InlineRule",
    "InlineRuleTable",
    "InlineToken",
    "MatchRegistry",
    "NodeToken",
    "Prioritized",
    "SoftBreakToken",
    "TextToken",
]
