"""Attribute filtering for rendered tags.

A filter is a frozenset of permitted attribute names, consulted only while
writing output. Names outside the filter are dropped without error;
``data-*`` names are always allowed.

"""

from __future__ import annotations

from collections.abc import Iterable

from subtilde.renderers.html import html_escape
from subtilde.stringbuilder import StringBuilder
from subtilde.utils.logger import get_logger

logger = get_logger(__name__)

# HTML global attributes
GLOBAL_ATTRIBUTE_FILTER: frozenset[str] = frozenset(
    {
        "accesskey",
        "autocapitalize",
        "autofocus",
        "class",
        "contenteditable",
        "dir",
        "draggable",
        "enterkeyhint",
        "hidden",
        "id",
        "inert",
        "inputmode",
        "is",
        "itemid",
        "itemprop",
        "itemref",
        "itemscope",
        "itemtype",
        "lang",
        "part",
        "role",
        "slot",
        "spellcheck",
        "style",
        "tabindex",
        "title",
        "translate",
    }
)


def is_allowed(name: str, attribute_filter: frozenset[str] | None) -> bool:
    """Whether ``name`` passes ``attribute_filter`` (None allows everything)."""
    if attribute_filter is None or name.startswith("data-"):
        return True
    return name in attribute_filter


def render_attributes(
    sb: StringBuilder,
    attributes: Iterable[tuple[str, str]],
    attribute_filter: frozenset[str] | None,
) -> None:
    """Write `` name="value"`` for every permitted attribute, in order."""
    for name, value in attributes:
        if not is_allowed(name, attribute_filter):
            logger.debug("Dropping attribute %r: not in filter", name)
            continue
        sb.append(f' {name}="{html_escape(value)}"')
