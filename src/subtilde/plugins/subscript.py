"""Subscript plugin for subtilde.

Adds support for single-tilde subscripts alongside ~~strikethrough~~.

Usage:
    >>> md = Markdown(plugins=["subscript", "strikethrough"])
    >>> md("H~2~O is ~~not~~ water")
    'H<sub>2</sub>O is <del>not</del> water'

Syntax:
H~2~O → H<sub>2</sub>O

A subscript opens on a ``~`` that follows a non-whitespace character and
is not followed by a second ``~``. It closes on the nearest ``~`` later on
the same line. The content between must be non-empty and hold no
whitespace; it is kept as plain text and never parsed for further markup.
Anything that fails these checks is left to the strikethrough rule, and
then to plain text.

The rule runs at priority 100, ahead of strikethrough at 500, so that
``H~2~O`` is claimed here before the tilde can become a delimiter run.

Thread Safety:
The scanner is a pure function and the rule and renderer are stateless.

"""

from __future__ import annotations

import functools
from collections.abc import Container
from dataclasses import dataclass
from typing import TYPE_CHECKING

from subtilde.nodes import Subscript, Text
from subtilde.parsing.charsets import TILDE, is_space
from subtilde.parsing.inline.rules import InlineMatch
from subtilde.parsing.inline.tokens import NodeToken
from subtilde.plugins import register_plugin
from subtilde.renderers.attributes import GLOBAL_ATTRIBUTE_FILTER, render_attributes

if TYPE_CHECKING:
    from subtilde.extensions import ExtensionsBuilder
    from subtilde.parsing.line import LineBuffer
    from subtilde.stringbuilder import StringBuilder

SUBSCRIPT_PRIORITY = 100

SUBSCRIPT_ATTRIBUTE_FILTER: frozenset[str] = GLOBAL_ATTRIBUTE_FILTER


@dataclass(frozen=True, slots=True)
class Span:
    """A recognized subscript region of a line.

    Offsets index the decoded line. ``content_start`` is always
    ``start_offset + 1`` and the content is never empty.

    Attributes:
        start_offset: Index of the opening ``~``.
        content_start: First index of the content.
        content_end: Index just past the content (the closing ``~``).
        consumed_length: Characters the scan advances past, both tildes
            included.

    """

    start_offset: int
    content_start: int
    content_end: int
    consumed_length: int

    @property
    def end_offset(self) -> int:
        """Index just past the closing ``~``."""
        return self.start_offset + self.consumed_length


def scan_subscript(
    preceding: str | None,
    text: str,
    literal: Container[int] = frozenset(),
    *,
    start: int = 0,
) -> Span | None:
    """Try to match a subscript whose opening ``~`` is ``text[start]``.

    The search reads forward from ``start`` only as far as the nearest
    closing ``~``, so scanning every tilde of a line stays linear.

    Args:
        preceding: Character before the opening ``~``, None at line start.
        text: The decoded line (or any text holding the opener at ``start``).
        literal: Indices into ``text`` of escaped or entity-decoded
            characters; a literal ``~`` never closes the span.
        start: Index of the opening ``~``.

    Returns:
        The Span, with offsets indexing ``text``, or None when no
        subscript starts here.
    """
    content_start = start + 1
    if len(text) - start < 2:
        return None
    if preceding is None or is_space(preceding):
        return None
    if text[content_start] == TILDE and content_start not in literal:
        return None

    close = text.find(TILDE, content_start)
    while close != -1 and close in literal:
        close = text.find(TILDE, close + 1)
    if close == -1:
        return None
    if close == content_start:
        return None

    for idx in range(content_start, close):
        if is_space(text[idx]):
            return None

    return Span(
        start_offset=start,
        content_start=content_start,
        content_end=close,
        consumed_length=close - start + 1,
    )


class SubscriptRule:
    """Inline rule producing complete Subscript nodes during the scan."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return "subscript"

    @property
    def triggers(self) -> frozenset[str]:
        return frozenset(TILDE)

    def parse(self, block: LineBuffer) -> InlineMatch | None:
        line = block.line
        span = scan_subscript(block.preceding_char, line.text, line.literal, start=block.pos)
        if span is None:
            return None

        content = Text(
            location=line.location(span.content_start, span.content_end),
            content=line.text[span.content_start : span.content_end],
        )
        node = Subscript(
            location=line.location(span.start_offset, span.end_offset),
            children=(content,),
        )
        return InlineMatch(NodeToken(node), span.consumed_length)


def render_subscript(
    sb: StringBuilder,
    node: Subscript,
    entering: bool,
    attribute_filter: frozenset[str] | None = SUBSCRIPT_ATTRIBUTE_FILTER,
) -> None:
    """Write the opening tag on entry and the closing tag on exit."""
    if not entering:
        sb.append("</sub>")
        return
    if node.attributes:
        sb.append("<sub")
        render_attributes(sb, node.attributes, attribute_filter)
        sb.append(">")
    else:
        sb.append("<sub>")


@register_plugin("subscript")
class SubscriptPlugin:
    """Plugin adding H~2~O subscript support.

    Args:
        attribute_filter: Attribute names the renderer keeps. Defaults to
            the HTML global attributes; None keeps every attribute.

    """

    __slots__ = ("_attribute_filter",)

    def __init__(self, attribute_filter: frozenset[str] | None = SUBSCRIPT_ATTRIBUTE_FILTER) -> None:
        self._attribute_filter = attribute_filter

    @property
    def name(self) -> str:
        return "subscript"

    def extend(self, builder: ExtensionsBuilder) -> None:
        renderer = render_subscript
        if self._attribute_filter is not SUBSCRIPT_ATTRIBUTE_FILTER:
            renderer = functools.partial(render_subscript, attribute_filter=self._attribute_filter)
        builder.add_inline_rule(SubscriptRule(), SUBSCRIPT_PRIORITY)
        builder.add_node_renderer(Subscript, renderer, SUBSCRIPT_PRIORITY)
