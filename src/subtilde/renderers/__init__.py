"""subtilde renderers.

Renderers convert typed AST nodes into output formats.

Available Renderers:
- HtmlRenderer: Renders AST to an inline HTML fragment

Thread Safety:
All renderers use a StringBuilder local to each render() call.
Safe for concurrent use from multiple threads.

"""

from subtilde.renderers.attributes import GLOBAL_ATTRIBUTE_FILTER, render_attributes
from subtilde.renderers.html import HtmlRenderer, NodeRenderer, html_escape

__all__ = [
    "GLOBAL_ATTRIBUTE_FILTER",
    "HtmlRenderer",
    "NodeRenderer",
    "html_escape",
    "render_attributes",
]
