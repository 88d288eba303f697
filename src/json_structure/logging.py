"""Logging helpers for json-structure.

The library only creates loggers under the ``json_structure`` hierarchy; it
never installs handlers on import.  Applications that want console output
call ``configure_logging()``.
"""

from __future__ import annotations

import logging

_LOGGER_NAME = "json_structure"

__all__ = ["configure_logging", "get_logger"]


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the json_structure hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling this repeatedly replaces the previous handler instead of stacking
    duplicates.

    Args:
        verbose: Log at DEBUG when True, INFO otherwise.

    Returns:
        The configured ``json_structure`` logger.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[json_structure] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
