"""Shared logger initialization for the CLI.

Usage:
    from reclaim_cli.utils.logger import get_logger
    log = get_logger(__name__)
    log.debug("message")

Log records go to stderr so ``--format json`` output on stdout stays clean.
"""
from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_FORMAT = "%(message)s"  # rich handler already adds time & level
_ROOT_LOGGER = "reclaim_cli"
_HANDLER: Optional[RichHandler] = None


def configure_logging(level: int = logging.WARNING) -> None:
    """Idempotently attach a stderr rich handler and set the package log level."""
    global _HANDLER
    root = logging.getLogger(_ROOT_LOGGER)
    if _HANDLER is None:
        _HANDLER = RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False)
        _HANDLER.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(_HANDLER)
        root.propagate = False
    root.setLevel(level)
    _HANDLER.setLevel(level)


def get_logger(name: str = __name__, level: Optional[int] = None) -> logging.Logger:
    """Return a module-level logger (configuring the package logger on first call)."""
    if _HANDLER is None:
        configure_logging()
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
