"""Logging helpers for the project."""

from __future__ import annotations

import logging

from ..config import Settings

DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def get_logger(name: str = "periodscan", level: int | str = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Return a configured :class:`logging.Logger` instance.

    A new ``StreamHandler`` is added only once per-logger to avoid
    duplicate log lines when calling this function multiple times.
    """

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def configure_logging(settings: Settings | None = None, *, verbose: int = 0) -> logging.Logger:
    """Configure the package logger from ``settings.logging``.

    Each ``verbose`` step lowers the level by one (``WARNING`` -> ``INFO`` ->
    ``DEBUG``).
    """

    if settings is None:
        settings = Settings()
    level = logging.getLevelName(settings.logging.level)
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {settings.logging.level!r}")
    level = max(logging.DEBUG, level - 10 * verbose)
    return get_logger("periodscan", level=level, fmt=settings.logging.format)
