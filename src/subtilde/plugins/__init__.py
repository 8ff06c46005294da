"""Plugin system for subtilde.

Plugins extend the inline parser and the HTML renderer:
- subscript: H~2~O single-tilde subscripts
- strikethrough: ~~deleted~~ and ~deleted~ spans

Usage:
    >>> from subtilde import Markdown
    >>>
    >>> md = Markdown(plugins=["subscript", "strikethrough"])
    >>> md("H~2~O and ~~gone~~")
    'H<sub>2</sub>O and <del>gone</del>'
    >>>
    >>> # Enable all plugins
    >>> md = Markdown(plugins=["all"])

Plugin Architecture:
A plugin is handed an ExtensionsBuilder and adds (rule, priority) and
(node renderer, priority) pairs to it. Nothing is patched and nothing is
registered as an import side effect on the parser: the order in which
rules are attempted comes from their priorities alone, so the subscript
rule (100) is always tried before strikethrough (500), whatever order
the plugins are listed in.

Thread Safety:
All plugins are stateless. Multiple threads can use the same plugin
instances and the Extensions they build concurrently.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from subtilde.errors import PluginError
from subtilde.utils.logger import get_logger

if TYPE_CHECKING:
    from subtilde.extensions import ExtensionsBuilder

__all__ = [
    "SubtildePlugin",
    "BUILTIN_PLUGINS",
    "register_plugin",
    "get_plugin",
    "apply_plugins",
]

logger = get_logger(__name__)


@runtime_checkable
class SubtildePlugin(Protocol):
    """Protocol for subtilde plugins.

    Thread Safety:
        Plugins must be stateless. All state should be in AST nodes.

    """

    @property
    def name(self) -> str:
        """Plugin identifier."""
        ...

    def extend(self, builder: ExtensionsBuilder) -> None:
        """Add inline rules and node renderers to ``builder``."""
        ...


# Registry of built-in plugins
BUILTIN_PLUGINS: dict[str, type[SubtildePlugin]] = {}


def register_plugin(
    name: str,
) -> Callable[[type[SubtildePlugin]], type[SubtildePlugin]]:
    """Decorator to register a plugin.

    Args:
        name: Plugin name for lookup

    Returns:
        Decorator function that registers and returns the class

    Usage:
        @register_plugin("subscript")
        class SubscriptPlugin:
                ...

    """

    def decorator(cls: type[SubtildePlugin]) -> type[SubtildePlugin]:
        BUILTIN_PLUGINS[name] = cls
        return cls

    return decorator


def get_plugin(name: str) -> SubtildePlugin:
    """Get a plugin instance by name.

    Args:
        name: Plugin name (e.g., "subscript", "strikethrough")

    Returns:
        Plugin instance

    Raises:
        PluginError: If plugin name is not recognized (also a KeyError)

    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS.keys()))
        raise PluginError(name, f"unknown plugin. Available: {available}")
    return BUILTIN_PLUGINS[name]()


def expand_plugin_names(plugins: Iterable[str]) -> list[str]:
    """Resolve ``"all"`` and drop duplicates, keeping first-seen order."""
    names: list[str] = []
    for plugin_name in plugins:
        expanded = list(BUILTIN_PLUGINS) if plugin_name == "all" else [plugin_name]
        for name in expanded:
            if name not in names:
                names.append(name)
    return names


def apply_plugins(plugins: Iterable[str], builder: ExtensionsBuilder) -> ExtensionsBuilder:
    """Apply plugins to an extensions builder.

    Args:
        plugins: Plugin names to apply; "all" applies every built-in plugin
        builder: Builder to extend

    Returns:
        The same builder, for chaining

    Raises:
        PluginError: If a plugin name is not recognized

    """
    for plugin_name in expand_plugin_names(plugins):
        plugin = get_plugin(plugin_name)
        if not builder.mark_applied(plugin.name):
            continue
        logger.debug("Applying plugin %r", plugin.name)
        plugin.extend(builder)
    return builder


# Import built-in plugins to register them
# These imports trigger the @register_plugin decorators
from subtilde.plugins.strikethrough import StrikethroughPlugin  # noqa: E402
from subtilde.plugins.subscript import SubscriptPlugin  # noqa: E402

__all__ += [
    "StrikethroughPlugin",
    "SubscriptPlugin",
]
