"""Exclusive full-viewport display mode around a presentation.

Entering and leaving are idempotent. A host that refuses the mode never stops
the presentation itself: the refusal is logged and the session carries on in
the normal view.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console

from pharma_pitch.config.logging import get_logger
from pharma_pitch.exceptions import DisplayModeError

logger = get_logger(__name__)


class DisplayHost(Protocol):
    """The environment that owns the viewport."""

    def request_exclusive(self) -> None: ...

    def release_exclusive(self) -> None: ...


class ExclusiveDisplay:
    """Tracks whether the exclusive mode is held and shields callers from host failures."""

    def __init__(self, host: DisplayHost | None = None):
        self._host = host
        self.active = False

    def enter(self) -> bool:
        """Request the exclusive mode. Returns whether it is now active."""
        if self.active or self._host is None:
            return self.active
        try:
            self._host.request_exclusive()
        except Exception as e:
            logger.warning("Exclusive display mode denied: %s", e)
            return False
        self.active = True
        return True

    def exit(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._host is None:
            return
        try:
            self._host.release_exclusive()
        except Exception as e:
            logger.warning("Failed to leave exclusive display mode: %s", e)

    def toggle(self) -> bool:
        if self.active:
            self.exit()
        else:
            self.enter()
        return self.active


class TerminalScreenHost:
    """Uses the terminal's alternate screen as the exclusive viewport."""

    def __init__(self, console: Console):
        self._console = console

    def request_exclusive(self) -> None:
        if not self._console.is_terminal:
            raise DisplayModeError("Alternate screen needs an interactive terminal")
        self._console.set_alt_screen(True)

    def release_exclusive(self) -> None:
        self._console.set_alt_screen(False)
