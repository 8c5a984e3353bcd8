"""Logging helpers for the position solver."""

from __future__ import annotations

import logging


def get_logger(name: str = "gnss_pos", level: int | None = None) -> logging.Logger:
    """Return a logger with a single ``[LEVEL] name: message`` stream handler.

    The level is only set when given explicitly, so module loggers inherit
    from the package logger.
    """

    logger = logging.getLogger(name)
    if not logger.handlers and "." not in name:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    if level is not None:
        logger.setLevel(level)
    return logger
