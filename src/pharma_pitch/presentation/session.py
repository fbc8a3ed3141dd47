"""Presentation sessions: choose the navigation mode and drive playback.

Three ways to start:

* pitch to a doctor: the doctor's saved playlist if any of it still resolves,
  otherwise brand-by-brand over the doctor's assigned brands;
* preview one brand, brand-by-brand;
* play a confirmed custom selection as a flat playlist (optionally saving it
  as the doctor's default first).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pharma_pitch.catalog.models import Brand, Doctor
from pharma_pitch.catalog.store import ContentStore
from pharma_pitch.config.logging import get_logger
from pharma_pitch.constants import FALLBACK_BRAND_NAME
from pharma_pitch.playlist.resolver import resolve_saved_playlist, save_default_playlist
from pharma_pitch.playlist.selection import SelectionResult, SlideSelection

from .controls import Command
from .display import ExclusiveDisplay
from .navigator import Navigator, Position

logger = get_logger(__name__)

CUSTOM_MODE_LABEL = "Custom Presentation"
BRAND_MODE_LABEL = "Current Brand"
EMPTY_MESSAGE = "No slides available to display."


@dataclass(frozen=True)
class BrandMenuEntry:
    index: int
    name: str
    slide_count: int
    active: bool


class PresentationSession:
    """One playback session. Can be closed at any time from any position."""

    def __init__(
        self,
        navigator: Navigator,
        doctor: Doctor | None = None,
        display: ExclusiveDisplay | None = None,
    ):
        self.navigator = navigator
        self.doctor = doctor
        self.display = display or ExclusiveDisplay()
        self.closed = False

    @property
    def position(self) -> Position:
        return self.navigator.position

    @property
    def is_custom(self) -> bool:
        return self.navigator.is_flat

    @property
    def mode_label(self) -> str:
        return CUSTOM_MODE_LABEL if self.is_custom else BRAND_MODE_LABEL

    @property
    def brand_name(self) -> str:
        brand = self.position.brand
        return brand.name if brand and brand.name else FALLBACK_BRAND_NAME

    @property
    def pitching_to(self) -> str | None:
        return self.doctor.name if self.doctor else None

    @property
    def is_empty(self) -> bool:
        """Nothing to display at the current position."""
        return not self.position.has_slide

    @property
    def counter(self) -> str:
        p = self.position
        return f"{p.number} / {p.total}"

    def open(self, fullscreen: bool = False) -> None:
        if fullscreen:
            self.display.enter()

    def next(self) -> Position:
        if self.closed:
            return self.position
        return self.navigator.next()

    def previous(self) -> Position:
        if self.closed:
            return self.position
        return self.navigator.previous()

    def jump_to_brand(self, brand_index: int) -> Position:
        if self.closed:
            return self.position
        return self.navigator.jump_to_brand(brand_index)

    def toggle_fullscreen(self) -> bool:
        return self.display.toggle()

    def brand_menu(self) -> list[BrandMenuEntry]:
        """Jump targets in brand mode; always empty for a custom playlist."""
        current = self.navigator.brand_index
        return [
            BrandMenuEntry(i, b.name, b.slide_count, i == current)
            for i, b in enumerate(self.navigator.brands)
        ]

    def handle(self, command: Command) -> bool:
        """Apply an input command. Returns False once the session is closed."""
        if command is Command.NEXT:
            self.next()
        elif command is Command.PREVIOUS:
            self.previous()
        elif command is Command.FULLSCREEN:
            self.toggle_fullscreen()
        elif command is Command.CLOSE:
            self.close()
        return not self.closed

    def close(self) -> None:
        if self.closed:
            return
        self.display.exit()
        self.closed = True
        logger.debug("Presentation closed at %s", self.counter)


def relevant_brands(
    catalog: Sequence[Brand], doctor: Doctor | None = None, brand: Brand | None = None
) -> list[Brand]:
    """Brands a brand-mode session walks: the doctor's, one brand, or the whole catalog."""
    if doctor is not None:
        return [b for b in catalog if doctor.is_assigned(b.id)]
    if brand is not None:
        current = next((b for b in catalog if b.id == brand.id), None)
        return [current or brand]
    return list(catalog)


def start_pitch_for_doctor(
    store: ContentStore, doctor: Doctor, display: ExclusiveDisplay | None = None
) -> PresentationSession:
    if doctor.has_saved_playlist:
        playlist = resolve_saved_playlist(doctor.saved_slide_ids, store.brands)
        if playlist:
            logger.info("Pitching saved %d-slide playlist to %s", len(playlist), doctor.name)
            return PresentationSession(Navigator.for_playlist(playlist), doctor, display)
        logger.info("Saved playlist for %s no longer resolves, using assigned brands", doctor.name)
    brands = relevant_brands(store.brands, doctor=doctor)
    return PresentationSession(Navigator.for_brands(brands), doctor, display)


def start_brand_preview(
    store: ContentStore, brand: Brand, display: ExclusiveDisplay | None = None
) -> PresentationSession:
    brands = relevant_brands(store.brands, brand=brand)
    return PresentationSession(Navigator.for_brands(brands), None, display)


def start_catalog_presentation(
    store: ContentStore, display: ExclusiveDisplay | None = None
) -> PresentationSession:
    return PresentationSession(Navigator.for_brands(store.brands), None, display)


def start_custom_presentation(
    store: ContentStore, result: SelectionResult, display: ExclusiveDisplay | None = None
) -> PresentationSession:
    """Play a confirmed selection, saving it as the doctor's default when asked."""
    if result.save_as_default and result.doctor is not None:
        save_default_playlist(store, result.doctor.id, result.playlist)
    return PresentationSession(Navigator.for_playlist(result.playlist), result.doctor, display)


def open_selector_for_doctor(store: ContentStore, doctor: Doctor) -> SlideSelection:
    return SlideSelection.for_doctor(store.brands, doctor)


def open_selector_for_brand(store: ContentStore, brand: Brand) -> SlideSelection:
    return SlideSelection.for_brand(store.brands, brand)
