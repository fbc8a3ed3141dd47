"""Playlist resolution and slide selection."""

from .resolver import (
    PlaylistItem,
    confirm_selection,
    playlist_slide_ids,
    resolve_saved_playlist,
    resolve_selection,
    save_default_playlist,
)
from .selection import SelectionResult, SlideSelection

__all__ = [
    "PlaylistItem",
    "confirm_selection",
    "playlist_slide_ids",
    "resolve_saved_playlist",
    "resolve_selection",
    "save_default_playlist",
    "SelectionResult",
    "SlideSelection",
]
