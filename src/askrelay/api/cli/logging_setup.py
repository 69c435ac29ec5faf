"""structlog configuration for the command line.

Logs always go to stderr: the ``hook`` command's stdout carries the JSON
result the host parses.
"""

from __future__ import annotations

import logging
import sys

import structlog

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str = "info", *, debug: bool = False) -> None:
    """Configure stdlib logging and structlog at ``level``."""
    numeric = logging.DEBUG if debug else _LEVELS.get(level.lower(), logging.INFO)
    logging.basicConfig(level=numeric, format="%(message)s", stream=sys.stderr)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )
