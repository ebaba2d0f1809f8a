"""Minimal logging helpers for the project."""

from __future__ import annotations

import logging
from typing import Optional

from ..config import Settings

DEFAULT_FORMAT = "%(levelname)s:%(name)s:%(message)s"


def get_logger(
    name: str = "sigscope",
    level: int | str | None = None,
    fmt: Optional[str] = None,
    *,
    settings: Settings | None = None,
) -> logging.Logger:
    """Return a configured :class:`logging.Logger` instance.

    ``level`` and ``fmt`` default to ``settings.logging``.  A new
    ``StreamHandler`` is added only once per-logger to avoid duplicate log
    lines when calling this function multiple times.
    """

    if settings is None:
        settings = Settings()
    if level is None:
        level = settings.logging.level
    if isinstance(level, str):
        level = level.upper()
    if fmt is None:
        fmt = settings.logging.format or DEFAULT_FORMAT

    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
