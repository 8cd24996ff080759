"""Logging setup for the gopuml command line."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable

from .models import Diagnostic

_ROOT = "gopuml"
CONSOLE_FORMAT = "[gopuml] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below the `gopuml` hierarchy."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def level_for(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Attach a console handler, and a file handler when `log_file` is given.

    Calling this again replaces the previous handlers.
    """
    level = level_for(verbose=verbose, quiet=quiet)
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_handler(logging.StreamHandler(), level, CONSOLE_FORMAT))
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        logger.addHandler(_handler(file_handler, level, FILE_FORMAT))
    return logger


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def log_diagnostic_summary(
    diagnostics: Iterable[Diagnostic], logger: logging.Logger | None = None
) -> Dict[str, int]:
    """Log one line per diagnostic kind and return the counts."""
    logger = logger or get_logger()
    counts = Counter(diagnostic.kind for diagnostic in diagnostics)
    for kind, count in sorted(counts.items()):
        logger.info("%d %s diagnostic(s)", count, kind)
    return dict(counts)


__all__ = ["configure_logging", "get_logger", "level_for", "log_diagnostic_summary"]
