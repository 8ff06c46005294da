"""Immutable AST transform: tag every subscript with attributes."""

import dataclasses

from subtilde import ExtensionsBuilder, HtmlRenderer, Markdown, transform
from subtilde.nodes import Subscript
from subtilde.plugins.subscript import SubscriptPlugin


def tag_subscripts(node) -> object:
    """Attach a class and an event handler (the handler is filtered on render)."""
    if isinstance(node, Subscript):
        return dataclasses.replace(
            node,
            attributes=(("class", "chem"), ("onclick", "alert(1)"), ("data-atoms", "2")),
        )
    return node


md = Markdown(plugins=["all"])
doc = md.parse("H~2~O and CO~2~")
tagged = transform(doc, tag_subscripts)

print("Original:")
print(md.render(doc))
print()
print("Tagged (global attribute filter):")
print(md.render(tagged))
print()

# A plugin instance with no filter keeps every attribute
builder = ExtensionsBuilder()
SubscriptPlugin(attribute_filter=None).extend(builder)
renderer = HtmlRenderer(node_renderers=builder.build().node_renderers)
print("Unfiltered:")
print(renderer.render(tagged))
