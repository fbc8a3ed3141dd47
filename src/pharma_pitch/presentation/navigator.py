"""Slide-by-slide navigation over a flat playlist or brand-grouped slides.

Navigator state is one of two immutable cursors:

* ``FlatCursor`` walks a pre-resolved playlist with a single index.
* ``BrandCursor`` walks brands in order, carrying across brand boundaries in
  both directions. Its displayed total is the current brand's slide count.

All transitions are pure functions of the cursor and are no-ops at the
boundaries; ``Navigator`` is a thin mutable holder around them.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Union

from pharma_pitch.catalog.models import Brand, Slide
from pharma_pitch.config.logging import get_logger
from pharma_pitch.playlist.resolver import PlaylistItem

logger = get_logger(__name__)


@dataclass(frozen=True)
class FlatCursor:
    playlist: tuple[PlaylistItem, ...]
    index: int = 0


@dataclass(frozen=True)
class BrandCursor:
    brands: tuple[Brand, ...]
    brand_index: int = 0
    slide_index: int = 0

    @property
    def brand(self) -> Brand | None:
        if 0 <= self.brand_index < len(self.brands):
            return self.brands[self.brand_index]
        return None

    @property
    def slide_count(self) -> int:
        b = self.brand
        return b.slide_count if b else 0


Cursor = Union[FlatCursor, BrandCursor]


@dataclass(frozen=True)
class Position:
    """What the playback view shows for the current cursor.

    ``slide`` is None when there is nothing to display (empty playlist, or a
    brand with no slides); ``number`` is then 0.
    """

    slide: Slide | None
    brand: Brand | None
    number: int
    total: int
    is_flat: bool

    @property
    def has_slide(self) -> bool:
        return self.slide is not None

    @property
    def progress(self) -> float:
        """Fraction of the current unit shown so far, 0.0 to 1.0."""
        return self.number / self.total if self.total else 0.0


def step_forward(cursor: Cursor) -> Cursor:
    if isinstance(cursor, FlatCursor):
        if cursor.index < len(cursor.playlist) - 1:
            return replace(cursor, index=cursor.index + 1)
        return cursor
    if cursor.slide_index < cursor.slide_count - 1:
        return replace(cursor, slide_index=cursor.slide_index + 1)
    if cursor.brand_index < len(cursor.brands) - 1:
        return replace(cursor, brand_index=cursor.brand_index + 1, slide_index=0)
    return cursor


def step_back(cursor: Cursor) -> Cursor:
    if isinstance(cursor, FlatCursor):
        if cursor.index > 0:
            return replace(cursor, index=cursor.index - 1)
        return cursor
    if cursor.slide_index > 0:
        return replace(cursor, slide_index=cursor.slide_index - 1)
    if cursor.brand_index > 0:
        prev = cursor.brands[cursor.brand_index - 1]
        return replace(
            cursor, brand_index=cursor.brand_index - 1, slide_index=max(0, prev.slide_count - 1)
        )
    return cursor


def jump_to_brand(cursor: Cursor, brand_index: int) -> Cursor:
    """Go to the first slide of a brand. Flat cursors and bad indexes are unchanged."""
    if isinstance(cursor, FlatCursor):
        logger.debug("jump_to_brand ignored in flat mode")
        return cursor
    if not 0 <= brand_index < len(cursor.brands):
        logger.warning(
            "jump_to_brand index %d out of range (%d brands)", brand_index, len(cursor.brands)
        )
        return cursor
    return replace(cursor, brand_index=brand_index, slide_index=0)


def is_at_start(cursor: Cursor) -> bool:
    """True at the very first slide of the very first unit."""
    if isinstance(cursor, FlatCursor):
        return cursor.index == 0
    return cursor.brand_index == 0 and cursor.slide_index == 0


def is_at_end(cursor: Cursor) -> bool:
    """True when ``step_forward`` would not move."""
    if isinstance(cursor, FlatCursor):
        return cursor.index >= len(cursor.playlist) - 1
    return (
        cursor.brand_index >= len(cursor.brands) - 1
        and cursor.slide_index >= cursor.slide_count - 1
    )


def position_of(cursor: Cursor) -> Position:
    if isinstance(cursor, FlatCursor):
        total = len(cursor.playlist)
        if 0 <= cursor.index < total:
            item = cursor.playlist[cursor.index]
            return Position(item.slide, item.brand, cursor.index + 1, total, True)
        return Position(None, None, 0, total, True)
    brand = cursor.brand
    total = cursor.slide_count
    if brand is not None and 0 <= cursor.slide_index < total:
        slide = brand.slides[cursor.slide_index]
        return Position(slide, brand, cursor.slide_index + 1, total, False)
    return Position(None, brand, 0, total, False)


class Navigator:
    """Holds the current cursor and applies transitions to it."""

    def __init__(self, cursor: Cursor):
        self.cursor = cursor

    @classmethod
    def for_playlist(cls, playlist: Sequence[PlaylistItem]) -> Navigator:
        return cls(FlatCursor(tuple(playlist)))

    @classmethod
    def for_brands(cls, brands: Sequence[Brand]) -> Navigator:
        return cls(BrandCursor(tuple(brands)))

    @property
    def is_flat(self) -> bool:
        return isinstance(self.cursor, FlatCursor)

    @property
    def position(self) -> Position:
        return position_of(self.cursor)

    @property
    def can_go_previous(self) -> bool:
        return not is_at_start(self.cursor)

    @property
    def can_go_next(self) -> bool:
        return not is_at_end(self.cursor)

    @property
    def brands(self) -> tuple[Brand, ...]:
        """Brands available to jump to (empty in flat mode)."""
        return self.cursor.brands if isinstance(self.cursor, BrandCursor) else ()

    @property
    def brand_index(self) -> int | None:
        return self.cursor.brand_index if isinstance(self.cursor, BrandCursor) else None

    def next(self) -> Position:
        self.cursor = step_forward(self.cursor)
        return self.position

    def previous(self) -> Position:
        self.cursor = step_back(self.cursor)
        return self.position

    def jump_to_brand(self, brand_index: int) -> Position:
        self.cursor = jump_to_brand(self.cursor, brand_index)
        return self.position
