"""Logging setup for pharma-pitch."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "pharma-pitch-rich"


def setup_logging(level: str | int = "WARNING", console: Console | None = None) -> None:
    """Install a rich handler on the package logger.

    Safe to call more than once; the handler is only added the first time,
    later calls just adjust the level.
    """
    root = logging.getLogger("pharma_pitch")
    root.setLevel(level)
    if any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        return
    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger under the package namespace."""
    return logging.getLogger(name)
