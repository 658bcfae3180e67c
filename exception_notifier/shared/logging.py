"""
Logging configuration for the notifier and its host application.

Sets up one consistent format on stdout.
Logging must not change program behavior.
Never logs filtered parameters or raw request bodies.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

PACKAGE_LOGGER = "exception_notifier"


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def configure_logging(level: str = "INFO", notifier_level: Optional[str] = None) -> None:
    """Configure structured logging.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR).
        notifier_level: Level for the notifier's own loggers; defaults to level.
    """
    logging.basicConfig(
        level=_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger(PACKAGE_LOGGER).setLevel(_level(notifier_level or level))

    # Suppress noisy server loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)
