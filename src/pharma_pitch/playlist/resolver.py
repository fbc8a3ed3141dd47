"""Turn slide selections into ordered playlists of (slide, owning brand) pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from pharma_pitch.catalog.models import Brand, Slide
from pharma_pitch.catalog.store import ContentStore
from pharma_pitch.config.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PlaylistItem:
    slide: Slide
    brand: Brand


def resolve_selection(selected_ids: Iterable[str], brands: Sequence[Brand]) -> list[PlaylistItem]:
    """Resolve a set of chosen slide ids in catalog order.

    Brands are walked in catalog order and slides in stored order, so the
    result never depends on the order the ids were picked in.
    """
    chosen = set(selected_ids)
    if not chosen:
        return []
    return [PlaylistItem(s, b) for b in brands for s in b.slides if s.id in chosen]


def resolve_saved_playlist(
    saved_ids: Sequence[str] | None, brands: Sequence[Brand]
) -> list[PlaylistItem]:
    """Rebuild a saved playlist in its stored order.

    Each id maps to the first matching slide in catalog order. Ids whose slide
    no longer exists are dropped without leaving a gap.
    """
    if not saved_ids:
        return []
    index: dict[str, PlaylistItem] = {}
    for b in brands:
        for s in b.slides:
            index.setdefault(s.id, PlaylistItem(s, b))
    playlist = [index[i] for i in saved_ids if i in index]
    dropped = len(saved_ids) - len(playlist)
    if dropped:
        logger.debug("Dropped %d stale slide ids from saved playlist", dropped)
    return playlist


def playlist_slide_ids(playlist: Iterable[PlaylistItem]) -> list[str]:
    return [item.slide.id for item in playlist]


def save_default_playlist(
    store: ContentStore, doctor_id: str, playlist: Sequence[PlaylistItem]
) -> None:
    """Overwrite the doctor's saved playlist with the playlist's id sequence."""
    store.set_saved_playlist(doctor_id, playlist_slide_ids(playlist))
    logger.info("Saved %d-slide default playlist for doctor %s", len(playlist), doctor_id)


def confirm_selection(
    store: ContentStore,
    selected_ids: Iterable[str],
    doctor_id: str | None = None,
    save_as_default: bool = False,
) -> list[PlaylistItem]:
    """Resolve a confirmed selection against the current catalog.

    When ``save_as_default`` is set and the selection belongs to a doctor, the
    resolved id sequence overwrites that doctor's saved playlist.
    """
    playlist = resolve_selection(selected_ids, store.brands)
    if save_as_default and doctor_id:
        save_default_playlist(store, doctor_id, playlist)
    return playlist
