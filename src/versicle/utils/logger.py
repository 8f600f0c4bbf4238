"""Minimal logging utilities for Versicle.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from versicle.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Compiling chapter")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "versicle." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'versicle.mymodule'
    """
    if not (name == "versicle" or name.startswith("versicle.")):
        name = f"versicle.{name}"
    return logging.getLogger(name)
