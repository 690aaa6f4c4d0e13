"""Logging setup for trustrank.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
the application's business. ``configure_logging`` is a convenience for
scripts and tests that want readable output without wiring handlers by hand.
"""

from __future__ import annotations

import logging
import os

from .exceptions import InvalidConfigError

LOG_LEVEL_ENV = "TRUSTRANK_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_ROOT_LOGGER_NAME = "trustrank"


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Attach a stream handler to the trustrank logger.

    Args:
        level: Logging level. Defaults to $TRUSTRANK_LOG_LEVEL, then WARNING.

    Returns:
        The configured package logger.

    Raises:
        InvalidConfigError: If ``level`` names no known logging level.
    """
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise InvalidConfigError("log_level", f"unknown log level {level!r}")
        level = resolved

    logger = logging.getLogger(_ROOT_LOGGER_NAME)
    logger.setLevel(level)

    # Re-configuring replaces our handler instead of stacking another one
    for handler in list(logger.handlers):
        if getattr(handler, "_trustrank_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._trustrank_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
