# File: lesson_scout/logger.py
"""lesson_scout.logger: one logger per crawl stage under ``lesson_scout``.

Modules take a child logger named after themselves::

    logger = get_logger(__name__)   # -> "lesson_scout.crawler.fetcher"

Output is attached once, to the package logger, by :func:`configure`.
Passing ``debug_loggers=["crawler.resource_policy"]`` turns on the
per-request DEBUG lines of that stage only.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, List, Optional, Union

__all__ = ["ROOT_LOGGER", "DEFAULT_FORMAT", "get_logger", "configure"]

ROOT_LOGGER = "lesson_scout"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_package_logger = logging.getLogger(ROOT_LOGGER)
_package_logger.addHandler(logging.NullHandler())

# children raised to DEBUG by the last configure() call
_elevated: List[logging.Logger] = []


def get_logger(name: str) -> logging.Logger:
    """Logger for *name*, a module ``__name__`` or a stage suffix like ``"engine"``."""
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return _package_logger.getChild(name)


def configure(
    level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    debug_loggers: Iterable[str] = (),
) -> logging.Logger:
    """Send package logs to stdout and, optionally, a rotating *log_file*.

    Handlers of a previous call are replaced. Loggers named in
    *debug_loggers* log at DEBUG whatever *level* is.
    """
    formatter = logging.Formatter(log_format)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    for old in list(_package_logger.handlers):
        _package_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        _package_logger.addHandler(handler)
    _package_logger.setLevel(level)
    _package_logger.propagate = False

    while _elevated:
        _elevated.pop().setLevel(logging.NOTSET)
    for name in debug_loggers:
        child = get_logger(name)
        child.setLevel(logging.DEBUG)
        _elevated.append(child)
    return _package_logger
