"""Presentation engine: navigation, sessions, display mode and input mapping."""

from .controls import Command, command_for_key, command_for_swipe
from .display import ExclusiveDisplay, TerminalScreenHost
from .navigator import BrandCursor, FlatCursor, Navigator, Position
from .session import (
    EMPTY_MESSAGE,
    PresentationSession,
    open_selector_for_brand,
    open_selector_for_doctor,
    relevant_brands,
    start_brand_preview,
    start_catalog_presentation,
    start_custom_presentation,
    start_pitch_for_doctor,
)

__all__ = [
    "Command",
    "command_for_key",
    "command_for_swipe",
    "ExclusiveDisplay",
    "TerminalScreenHost",
    "BrandCursor",
    "FlatCursor",
    "Navigator",
    "Position",
    "EMPTY_MESSAGE",
    "PresentationSession",
    "open_selector_for_brand",
    "open_selector_for_doctor",
    "relevant_brands",
    "start_brand_preview",
    "start_catalog_presentation",
    "start_custom_presentation",
    "start_pitch_for_doctor",
]
