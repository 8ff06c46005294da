"""Strikethrough plugin for subtilde.

Adds support for ~~deleted~~ (and ~deleted~) syntax.

Usage:
    >>> md = Markdown(plugins=["strikethrough"])
    >>> md("~~deleted text~~")
    '<del>deleted text</del>'

Syntax:
~~text~~ → <del>text</del>
~text~ → <del>text</del>

Runs of one or two tildes become delimiters and pair up exactly like
emphasis runs, so strikethrough can contain other inline elements:
~~**bold deleted**~~ → <del><strong>bold deleted</strong></del>

A run of three or more tildes, or a run directly after another tilde,
is left as text.

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from subtilde.nodes import Strikethrough
from subtilde.parsing.charsets import TILDE
from subtilde.parsing.inline.delimiters import scan_delimiter
from subtilde.parsing.inline.rules import EMPHASIS_PRIORITY, InlineMatch
from subtilde.plugins import register_plugin

if TYPE_CHECKING:
    from subtilde.extensions import ExtensionsBuilder
    from subtilde.parsing.line import LineBuffer
    from subtilde.stringbuilder import StringBuilder

STRIKETHROUGH_PRIORITY = EMPHASIS_PRIORITY


class StrikethroughRule:
    """Delimiter runs of ``~``, paired later into strikethrough spans."""

    __slots__ = ()

    @property
    def name(self) -> str:
        return "strikethrough"

    @property
    def triggers(self) -> frozenset[str]:
        return frozenset(TILDE)

    def parse(self, block: LineBuffer) -> InlineMatch | None:
        if block.preceding_char == TILDE:
            return None
        token = scan_delimiter(block)
        if token.run_length > 2:
            return None
        return InlineMatch(token, token.run_length)


def render_strikethrough(sb: StringBuilder, node: Strikethrough, entering: bool) -> None:
    sb.append("<del>" if entering else "</del>")


@register_plugin("strikethrough")
class StrikethroughPlugin:
    """Plugin adding ~~strikethrough~~ support."""

    @property
    def name(self) -> str:
        return "strikethrough"

    def extend(self, builder: ExtensionsBuilder) -> None:
        builder.add_inline_rule(StrikethroughRule(), STRIKETHROUGH_PRIORITY)
        builder.add_node_renderer(Strikethrough, render_strikethrough, STRIKETHROUGH_PRIORITY)
