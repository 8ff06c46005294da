"""Exception classes for subtilde.

Scanning never raises: an inline rule that does not apply returns None and
the character falls through to the next rule or to literal text. The
exceptions below cover configuration and rendering mistakes made by callers.
"""

from __future__ import annotations


class SubtildeError(Exception):
    """Base exception for all subtilde errors."""


class PluginError(SubtildeError, KeyError):
    """Error in plugin lookup or registration.

    Also a KeyError, since it is raised for unknown plugin names.
    """

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the failing plugin
            message: Description of the error
        """
        self.plugin_name = plugin_name
        self.message = message
        super().__init__(f"Plugin '{plugin_name}': {message}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return f"Plugin '{self.plugin_name}': {self.message}"


class RenderError(SubtildeError):
    """Error during HTML rendering.

    Raised when the renderer meets a node kind that no core branch and no
    registered node renderer knows how to write.
    """

    def __init__(self, node_type: str, message: str = "no renderer registered") -> None:
        self.node_type = node_type
        super().__init__(f"{node_type}: {message}")
