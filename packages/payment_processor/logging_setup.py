"""Logging configuration for the ``payment_processor`` package.

Library modules call ``get_logger(__name__)`` and never attach handlers. The
console front end calls :func:`configure_logging` with the level taken from
``--log-level`` (or ``PAYMENT_PROCESSOR_LOG_LEVEL``); calling it again only
changes the level.
"""

from __future__ import annotations

import logging
import sys

PKG_LOGGER_NAME = "payment_processor"
LOG_LEVEL_ENV_VAR = "PAYMENT_PROCESSOR_LOG_LEVEL"

_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is when a record is emitted."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


def resolve_level(level: int | str | None) -> int:
    """Map ``level`` to a numeric logging level; ``None`` means INFO.

    Accepts ints, numeric strings and level names in any case. Unknown names
    raise ``ValueError``.
    """

    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    if numeric is None:
        raise ValueError(f"unknown log level: {level!r}")
    return numeric


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Route package logs to stderr at ``level`` and return the package logger."""

    resolved = resolve_level(level)
    logger = logging.getLogger(PKG_LOGGER_NAME)

    handler = next((h for h in logger.handlers if isinstance(h, _StderrHandler)), None)
    if handler is None:
        for h in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
            logger.removeHandler(h)
        handler = _StderrHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    handler.setLevel(resolved)
    logger.setLevel(resolved)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger; the package logger stays silent until configured."""

    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "LOG_LEVEL_ENV_VAR",
    "PKG_LOGGER_NAME",
    "configure_logging",
    "get_logger",
    "resolve_level",
]
