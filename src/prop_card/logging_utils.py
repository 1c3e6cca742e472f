"""Centralized logging configuration helpers."""

from __future__ import annotations

import logging
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(name: Optional[str] = None) -> logging.Logger:
    """Return a logger configured with the project defaults."""

    logger = logging.getLogger(name if name else "prop_card")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(get_settings().LOG_LEVEL)
    return logger
