from __future__ import annotations

import logging

from ..core.constants import DEFAULT_LOG_LEVEL

_ROOT = "sigrap"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> logging.Logger:
    logger = logging.getLogger(_ROOT)
    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(ch)
    logger.setLevel(level.upper())
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child of the ``sigrap`` logger, e.g. ``get_logger("sales")``."""
    return logging.getLogger(f"{_ROOT}.{name}")
