"""
subtilde: single-tilde subscripts that coexist with ~~strikethrough~~.

An inline Markdown parser built around one question: when the scan meets
a ``~``, is it a subscript (``H~2~O``), a strikethrough delimiter
(``~~gone~~``), or plain text? Subscripts are resolved in one left-to-right
pass, strikethrough and emphasis by CommonMark delimiter matching.

Quick Start:
    >>> from subtilde import parse, render
    >>> doc = parse("H~2~O", plugins=["subscript", "strikethrough"])
    >>> render(doc)
    'H<sub>2</sub>O'

    >>> # Or use the high-level Markdown class
    >>> from subtilde import Markdown
    >>> md = Markdown(plugins=["all"])
    >>> md("C~6~H~12~O~6~ is ~~not~~ sugar")
    'C<sub>6</sub>H<sub>12</sub>O<sub>6</sub> is <del>not</del> sugar'

Output is an inline HTML fragment; there is no block-level parsing.

"""

import functools
from collections.abc import Iterable

from subtilde.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from subtilde.errors import PluginError, RenderError, SubtildeError
from subtilde.extensions import Extensions, ExtensionsBuilder
from subtilde.location import SourceLocation
from subtilde.nodes import (
    Document,
    Emphasis,
    Inline,
    LineBreak,
    Node,
    SoftBreak,
    Strikethrough,
    Strong,
    Subscript,
    Text,
)
from subtilde.parsing.inline.core import InlineParser
from subtilde.plugins import apply_plugins
from subtilde.plugins.subscript import Span, scan_subscript
from subtilde.renderers.html import HtmlRenderer
from subtilde.serialization import from_dict, from_json, to_dict, to_json
from subtilde.visitor import BaseVisitor, transform, walk

__version__ = "0.1.0"


@functools.cache
def build_extensions(plugins: tuple[str, ...]) -> Extensions:
    """Build (once per plugin list) the Extensions for ``plugins``.

    Raises:
        PluginError: If a plugin name is not recognized
    """
    return apply_plugins(plugins, ExtensionsBuilder()).build()


def _parse_document(source: str, source_file: str | None) -> Document:
    children = InlineParser(source_file=source_file).parse(source)
    loc = SourceLocation(lineno=1, col_offset=0, source_file=source_file)
    return Document(location=loc, children=children)


def parse(
    source: str,
    *,
    source_file: str | None = None,
    plugins: Iterable[str] | None = None,
) -> Document:
    """Parse Markdown inline text into a typed AST.

    Args:
        source: Markdown text; lines are separated by "\\n"
        source_file: Optional source file path recorded in locations
        plugins: Plugin names to enable for this call. When None, the
            active ParseConfig decides (core rules only by default).

    Returns:
        Document AST root node

    Example:
        >>> parse("H~2~O", plugins=["subscript"]).children[1]
        Subscript(...)

    """
    if plugins is None:
        return _parse_document(source, source_file)

    extensions = build_extensions(tuple(plugins))
    config = ParseConfig(inline_rules=extensions.inline_rules, plugins=extensions.plugins)
    with parse_config_context(config):
        return _parse_document(source, source_file)


def render(doc: Document, *, plugins: Iterable[str] = ("all",)) -> str:
    """Render an AST Document to HTML.

    Args:
        doc: Document AST to render
        plugins: Plugins whose node renderers to use (all built-ins by default)

    Returns:
        HTML fragment

    Raises:
        RenderError: If the tree holds a node kind with no renderer

    """
    extensions = build_extensions(tuple(plugins))
    return HtmlRenderer(node_renderers=extensions.node_renderers).render(doc)


class Markdown:
    """High-level Markdown processor combining parser and renderer.

    Usage:
        >>> md = Markdown(plugins=["subscript", "strikethrough"])
        >>> md("H~2~O")
        'H<sub>2</sub>O'

        >>> # Access the AST
        >>> doc = md.parse("H~2~O")
        >>> doc.children[1].children[0].content
        '2'

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Markdown instances concurrently from different threads.

    """

    __slots__ = ("_config", "_extensions", "_renderer")

    def __init__(self, *, plugins: Iterable[str] | None = None) -> None:
        """Initialize Markdown processor.

        Args:
            plugins: Plugin names to enable (e.g., ["subscript"]).
                Use ["all"] to enable all built-in plugins.

        Raises:
            PluginError: If a plugin name is not recognized
        """
        self._extensions = build_extensions(tuple(plugins or ()))
        # Build immutable config once (thread-safe, reused across calls)
        self._config = ParseConfig(
            inline_rules=self._extensions.inline_rules,
            plugins=self._extensions.plugins,
        )
        self._renderer = HtmlRenderer(node_renderers=self._extensions.node_renderers)

    @property
    def plugins(self) -> tuple[str, ...]:
        """Applied plugin names, with "all" expanded."""
        return self._extensions.plugins

    @property
    def extensions(self) -> Extensions:
        return self._extensions

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call."""
        return self._renderer.render(self.parse(source))

    def parse(self, source: str, *, source_file: str | None = None) -> Document:
        """Parse Markdown source into AST.

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.
        """
        with parse_config_context(self._config):
            return _parse_document(source, source_file)

    def parse_many(
        self,
        sources: Iterable[str],
        *,
        source_file: str | None = None,
    ) -> list[Document]:
        """Parse multiple sources, setting the config once for the batch."""
        with parse_config_context(self._config):
            return [_parse_document(source, source_file) for source in sources]

    def render(self, doc: Document) -> str:
        """Render an AST Document with this instance's node renderers."""
        return self._renderer.render(doc)


__all__ = [
    # Main API
    "parse",
    "render",
    "Markdown",
    "build_extensions",
    # Subscript core
    "scan_subscript",
    "Span",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Extensions
    "Extensions",
    "ExtensionsBuilder",
    "apply_plugins",
    # Components
    "InlineParser",
    "HtmlRenderer",
    # Visitor / serialization
    "BaseVisitor",
    "transform",
    "walk",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    # Errors
    "SubtildeError",
    "PluginError",
    "RenderError",
    # Location
    "SourceLocation",
    # Nodes
    "Node",
    "Document",
    "Inline",
    "Text",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Subscript",
    "LineBreak",
    "SoftBreak",
]
