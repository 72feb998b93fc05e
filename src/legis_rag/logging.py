"""Structured logging setup on top of loguru."""
from __future__ import annotations

import sys

from loguru import logger

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{extra[component]} | {message}"
)


def configure_logging(level: str = "INFO", sink=sys.stderr) -> int:
    """Replace loguru's default handler with a component-aware sink.

    Call once at process start. Returns the handler id so callers (and
    tests) can remove it again.
    """
    logger.remove()
    logger.configure(extra={"component": "-"})
    return logger.add(sink, level=level.upper(), format=_FORMAT, backtrace=False, diagnose=False)


def get_logger(name: str):
    return logger.bind(component=name)
