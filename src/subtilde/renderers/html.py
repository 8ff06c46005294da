"""HTML renderer using the StringBuilder pattern.

Renders the typed AST to an inline HTML fragment. Core node kinds are
written by a ``match`` over the closed inline union; plugin kinds
(strikethrough, subscript) are written by node renderers registered
through ``subtilde.extensions``. A node renderer is called twice per
node, once on entry and once on exit, with the children rendered in
between.

Thread Safety:
HtmlRenderer holds only an immutable mapping of node renderers. Every
render() call builds its own StringBuilder, so one instance may be shared
by any number of threads.

"""

from __future__ import annotations

import html
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from subtilde.errors import RenderError
from subtilde.nodes import (
    Document,
    Emphasis,
    Inline,
    LineBreak,
    SoftBreak,
    Strong,
    Text,
)
from subtilde.stringbuilder import StringBuilder

if TYPE_CHECKING:
    from subtilde.nodes import Node

# (sb, node, entering) -> None
type NodeRenderer = Callable[[StringBuilder, Any, bool], None]


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    CommonMark-compliant: escapes <, >, &, " but NOT single quotes.
    Python's html.escape() escapes ' to &#x27; which CommonMark doesn't require.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


class HtmlRenderer:
    """Render AST to HTML.

    Usage:
        >>> from subtilde import parse
        >>> from subtilde.extensions import ExtensionsBuilder
        >>> ext = ExtensionsBuilder().build()
        >>> HtmlRenderer(node_renderers=ext.node_renderers).render(parse("*a*"))
        '<em>a</em>'

    Registered node renderers take precedence over the built-in branches,
    so a plugin may also restyle a core kind.

    """

    __slots__ = ("_node_renderers",)

    def __init__(self, *, node_renderers: Mapping[type, NodeRenderer] | None = None) -> None:
        """Initialize renderer.

        Args:
            node_renderers: Node type to renderer mapping, usually
                ``Extensions.node_renderers``.
        """
        self._node_renderers: Mapping[type, NodeRenderer] = MappingProxyType(
            dict(node_renderers or {})
        )

    @property
    def node_renderers(self) -> Mapping[type, NodeRenderer]:
        return self._node_renderers

    def render(self, node: Document) -> str:
        """Render a document to an HTML string.

        Raises:
            RenderError: If the tree holds a node kind nothing can render.
        """
        sb = StringBuilder()
        self._render_inlines(node.children, sb)
        return sb.build()

    def render_inline(self, node: Node) -> str:
        """Render a single inline node (and its children) to HTML."""
        sb = StringBuilder()
        self._render_inline(node, sb)  # type: ignore[arg-type]
        return sb.build()

    def _render_inlines(self, inlines: tuple[Inline, ...], sb: StringBuilder) -> None:
        for inline in inlines:
            self._render_inline(inline, sb)

    def _render_inline(self, inline: Inline, sb: StringBuilder) -> None:
        """Render an inline node."""
        node_renderer = self._node_renderers.get(type(inline))
        if node_renderer is not None:
            node_renderer(sb, inline, True)
            children = getattr(inline, "children", None)
            if children:
                self._render_inlines(children, sb)
            node_renderer(sb, inline, False)
            return

        match inline:
            case Text():
                sb.append(html_escape(inline.content))
            case Emphasis():
                sb.append("<em>")
                self._render_inlines(inline.children, sb)
                sb.append("</em>")
            case Strong():
                sb.append("<strong>")
                self._render_inlines(inline.children, sb)
                sb.append("</strong>")
            case LineBreak():
                sb.append("<br />\n")
            case SoftBreak():
                sb.append("\n")
            case _:
                raise RenderError(type(inline).__name__)
