"""Map raw input (keys, swipes) to presentation commands."""

from __future__ import annotations

from enum import Enum

from pharma_pitch.constants import MIN_SWIPE_DISTANCE


class Command(str, Enum):
    NEXT = "next"
    PREVIOUS = "previous"
    CLOSE = "close"
    BRANDS = "brands"
    FULLSCREEN = "fullscreen"


#Browser-style key names plus the single letters the terminal player reads
KEY_BINDINGS: dict[str, Command] = {
    "arrowright": Command.NEXT,
    "right": Command.NEXT,
    "n": Command.NEXT,
    " ": Command.NEXT,
    "arrowleft": Command.PREVIOUS,
    "left": Command.PREVIOUS,
    "p": Command.PREVIOUS,
    "escape": Command.CLOSE,
    "esc": Command.CLOSE,
    "q": Command.CLOSE,
    "b": Command.BRANDS,
    "f": Command.FULLSCREEN,
}


def command_for_key(key: str) -> Command | None:
    """Look up a key, case-insensitively. Unknown keys map to None."""
    if key == " ":
        return Command.NEXT
    return KEY_BINDINGS.get(key.strip().lower())


def command_for_swipe(
    start_x: float | None, end_x: float | None, min_distance: float = MIN_SWIPE_DISTANCE
) -> Command | None:
    """A leftward swipe advances, a rightward one goes back; short drags are ignored."""
    if start_x is None or end_x is None:
        return None
    distance = start_x - end_x
    if distance > min_distance:
        return Command.NEXT
    if distance < -min_distance:
        return Command.PREVIOUS
    return None
