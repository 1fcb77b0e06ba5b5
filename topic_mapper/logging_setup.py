"""
Centralised logging configuration for Topic Mapper.

Every module obtains its logger via ``get_logger(<module>)``.
The mapper calls ``configure_logging`` once at startup so that all
downstream loggers share the same handler, format, and level.

The namespace logger keeps propagating to the root logger, so a host
application (or pytest's ``caplog``) still receives every record.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional


_CONFIGURED = False

LOGGER_NAMESPACE = "topic_mapper"

LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> None:
    """Set up the ``topic_mapper`` namespace logger.

    Parameters
    ----------
    level:
        Minimum severity to emit.
    log_file:
        If provided, a ``FileHandler`` is added alongside the console handler.
    """
    global _CONFIGURED  # noqa: PLW0603
    if _CONFIGURED:
        return

    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``topic_mapper`` namespace."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")
