"""Utility modules for subtilde.

Provides:
- logger: get_logger for namespaced logging
"""

from subtilde.utils.logger import get_logger

__all__ = ["get_logger"]
