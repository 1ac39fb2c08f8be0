"""
Logging utilities for the gradebook command line.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
PACKAGE_LOGGER = "gradebook"


class _GradebookHandler(logging.StreamHandler):
    """Marker class so configure_logging() can find its own handler again."""


def configure_logging(level: int | str = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling this again replaces the previous handler instead of adding a
    second one, so repeated CLI invocations in one process do not
    duplicate output.

    Args:
        level: Logging level (int or name such as "DEBUG")
        stream: Destination stream. None = stderr.

    Returns:
        The configured package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level!r}")

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if isinstance(existing, _GradebookHandler):
            logger.removeHandler(existing)

    handler = _GradebookHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def level_for_verbosity(verbose: bool, quiet: bool) -> int:
    """Map -v / -q flags to a logging level."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO
