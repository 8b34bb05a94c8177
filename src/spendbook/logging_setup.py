"""Centralized logging configuration for the ``spendbook`` package.

- ``configure_logging(...)`` attaches a single ``StreamHandler`` to the
  package root logger. The CLI calls it once at startup.
- ``get_logger(name)`` returns a logger and makes sure the package root
  logger has a ``NullHandler`` when nothing has been configured, so library
  use stays silent.

Library modules never attach handlers of their own.
"""

import logging
import os
import sys
from typing import IO, Optional, Union

_PKG_LOGGER_NAME = "spendbook"
_CONFIGURED = False


def parse_level(level: Union[int, str, None]) -> int:
    """Turn a level name, numeric string or int into a logging level.

    ``None`` falls back to ``SPENDBOOK_LOG_LEVEL`` and then WARNING.
    """
    if level is None:
        level = os.getenv("SPENDBOOK_LOG_LEVEL")
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    return logging.WARNING


def configure_logging(
    level: Union[int, str, None] = None,
    *,
    fmt: Optional[str] = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Logging level as int or level name; None uses the
            SPENDBOOK_LOG_LEVEL environment variable, then WARNING
        fmt: Optional format string
        stream: Output stream for the handler (defaults to stderr)
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)

    # Drop the NullHandler added by get_logger so records are not swallowed
    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    resolved = parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s"))

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name with a silent default for library use."""
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
