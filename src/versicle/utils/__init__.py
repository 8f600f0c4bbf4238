"""Utility modules for Versicle.

Provides:
- logger: get_logger for logging
- text: line/column lookup for error messages
"""

from versicle.utils.logger import get_logger
from versicle.utils.text import line_col

__all__ = [
    "get_logger",
    "line_col",
]
