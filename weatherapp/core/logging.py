"""
Logging setup for the weather app.

All modules log through ``logging.getLogger(__name__)`` under the
``weatherapp`` namespace; this installs a single console handler on it.
"""

from __future__ import annotations

import logging

PACKAGE_LOGGER = "weatherapp"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates when the app is rebuilt
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger
