"""Typed inline tokens for the subtilde inline parser.

Tokens are NamedTuples: immutable, cheap, and usable in ``match``
statements. Delimiter match state lives in MatchRegistry, never on the
tokens themselves.

Usage:
    match token:
        case DelimiterToken(char="~", run_length=n):
            ...

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, NamedTuple

if TYPE_CHECKING:
    from subtilde.location import SourceLocation
    from subtilde.nodes import Inline

# PEP 695 type alias for delimiter characters
type DelimiterChar = Literal["*", "_", "~"]


class DelimiterToken(NamedTuple):
    """A run of emphasis or strikethrough delimiter characters.

    Attributes:
        char: The delimiter character ("*", "_", or "~").
        run_length: Number of consecutive delimiter characters.
        can_open: Whether the run can open a span.
        can_close: Whether the run can close a span.
        location: Source location of the run.

    """

    char: DelimiterChar
    run_length: int
    can_open: bool
    can_close: bool
    location: SourceLocation | None = None


class TextToken(NamedTuple):
    """Plain text token."""

    content: str
    location: SourceLocation | None = None


class NodeToken(NamedTuple):
    """A fully built inline node (subscripts) produced by a rule."""

    node: Inline


class HardBreakToken(NamedTuple):
    """Hard line break between two lines."""

    location: SourceLocation | None = None


class SoftBreakToken(NamedTuple):
    """Soft line break between two lines."""

    location: SourceLocation | None = None


# PEP 695 type alias for all inline tokens
type InlineToken = DelimiterToken | TextToken | NodeToken | HardBreakToken | SoftBreakToken


__all__ = [
    "DelimiterChar",
    "DelimiterToken",
    "TextToken",
    "NodeToken",
    "HardBreakToken",
    "SoftBreakToken",
    "InlineToken",
]
