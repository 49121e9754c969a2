"""Shared logger for the query catalog modules."""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger("query_catalog")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)


def set_level(level: str) -> None:
    """Apply ``level`` by name, falling back to INFO for unknown names."""
    try:
        logger.setLevel(level.upper())
    except ValueError:
        logger.setLevel(logging.INFO)
        logger.warning("Unknown LOG_LEVEL %r, using INFO", level)


set_level(LOG_LEVEL)
