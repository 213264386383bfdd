"""Logger setup shared by the resolver, writer, CLI and service."""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "polyfills_loader"
_CONSOLE_FORMAT = "[polyfills-loader] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``polyfills_loader.<name>``, or the package logger itself."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send package log records to stderr, and to ``log_file`` when given.

    ``verbose`` lowers the threshold to DEBUG, which includes one line per
    resolved polyfill. Calling this again replaces the handlers installed by
    the previous call.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False
    logger.handlers.clear()

    handlers: list[logging.Handler] = [_with_format(logging.StreamHandler(), _CONSOLE_FORMAT)]
    if log_file is not None:
        handlers.append(_with_format(logging.FileHandler(log_file, encoding="utf-8"), _FILE_FORMAT))
    for handler in handlers:
        handler.setLevel(level)
        logger.addHandler(handler)
    return logger


def _with_format(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = ["configure_logging", "get_logger"]
