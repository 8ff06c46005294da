"""Logging helpers for subtilde.

Every logger lives under the ``subtilde`` namespace so applications can
tune the whole library with one ``logging.getLogger("subtilde")`` call.
The library never installs handlers.

Example:
    >>> from subtilde.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Applying plugin %r", "subscript")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance under the "subtilde." prefix

    Example:
        >>> get_logger("renderers").name
        'subtilde.renderers'
    """
    if not (name == "subtilde" or name.startswith("subtilde.")):
        name = f"subtilde.{name}"
    return logging.getLogger(name)
