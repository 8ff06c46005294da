"""Extension assembly: inline rules and node renderers.

Plugins never patch parser or renderer classes. They receive an
ExtensionsBuilder and add values to it: inline rules at a priority among
inline rules, node renderers at a priority among node renderers. The
builder then produces an immutable Extensions object that the parser and
renderer read from.

Priorities follow one convention everywhere: lower values are attempted
(or win) first.

Thread Safety:
Extensions is immutable after creation. Safe to share.
Use ExtensionsBuilder for mutable construction.

Example:
    >>> builder = ExtensionsBuilder()
    >>> builder.add_inline_rule(SubscriptRule(), SUBSCRIPT_PRIORITY)
    >>> builder.add_node_renderer(Subscript, render_subscript, SUBSCRIPT_PRIORITY)
    >>> extensions = builder.build()
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from subtilde.parsing.inline.rules import (
    CORE_INLINE_RULES,
    InlineRule,
    InlineRuleTable,
    Prioritized,
)

if TYPE_CHECKING:
    from subtilde.renderers.html import NodeRenderer


class Extensions:
    """Immutable set of inline rules and node renderers.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_inline_rules", "_node_renderers", "_plugins")

    def __init__(
        self,
        inline_rules: InlineRuleTable,
        node_renderers: Mapping[type, NodeRenderer],
        plugins: tuple[str, ...] = (),
    ) -> None:
        """Initialize with pre-built values.

        Use ExtensionsBuilder to create instances.
        """
        self._inline_rules = inline_rules
        self._node_renderers = MappingProxyType(dict(node_renderers))
        self._plugins = plugins

    @property
    def inline_rules(self) -> InlineRuleTable:
        return self._inline_rules

    @property
    def node_renderers(self) -> Mapping[type, NodeRenderer]:
        return self._node_renderers

    @property
    def plugins(self) -> tuple[str, ...]:
        """Names of the plugins that contributed, in application order."""
        return self._plugins

    def renderer_for(self, node_type: type) -> NodeRenderer | None:
        """Get the node renderer for ``node_type``, if one is registered."""
        return self._node_renderers.get(node_type)

    def __repr__(self) -> str:
        kinds = ", ".join(t.__name__ for t in self._node_renderers)
        return f"Extensions(rules={self._inline_rules.names!r}, renderers=[{kinds}])"


class ExtensionsBuilder:
    """Mutable builder for Extensions.

    Starts from the core inline rules (emphasis), which every parse needs.
    """

    __slots__ = ("_rules", "_renderers", "_plugins")

    def __init__(self, base_rules: InlineRuleTable = CORE_INLINE_RULES) -> None:
        self._rules: list[Prioritized[InlineRule]] = list(base_rules.entries)
        self._renderers: dict[type, Prioritized[NodeRenderer]] = {}
        self._plugins: list[str] = []

    def add_inline_rule(self, rule: InlineRule, priority: int) -> ExtensionsBuilder:
        """Add an inline rule at ``priority``.

        Raises:
            TypeError: If ``rule`` does not implement the InlineRule protocol
        """
        if not isinstance(rule, InlineRule):
            msg = f"Rule {type(rule).__name__} does not implement InlineRule"
            raise TypeError(msg)
        self._rules.append(Prioritized(rule, priority))
        return self

    def add_node_renderer(
        self, node_type: type, renderer: NodeRenderer, priority: int
    ) -> ExtensionsBuilder:
        """Add a renderer for ``node_type``.

        When several renderers are added for one node type, the lowest
        priority value wins; ties keep the first one added.
        """
        if not callable(renderer):
            msg = f"Renderer for {node_type.__name__} is not callable"
            raise TypeError(msg)
        current = self._renderers.get(node_type)
        if current is None or priority < current.priority:
            self._renderers[node_type] = Prioritized(renderer, priority)
        return self

    def mark_applied(self, plugin_name: str) -> bool:
        """Record that a plugin was applied; False if it already was."""
        if plugin_name in self._plugins:
            return False
        self._plugins.append(plugin_name)
        return True

    @property
    def applied_plugins(self) -> tuple[str, ...]:
        return tuple(self._plugins)

    def build(self) -> Extensions:
        """Build immutable Extensions from everything added so far."""
        return Extensions(
            inline_rules=InlineRuleTable(self._rules),
            node_renderers={t: entry.value for t, entry in self._renderers.items()},
            plugins=tuple(self._plugins),
        )

    def __len__(self) -> int:
        """Number of inline rules added, core rules included."""
        return len(self._rules)
