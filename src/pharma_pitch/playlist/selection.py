"""Slide picker state: which slides are chosen and whether to save them as a default."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from pharma_pitch.catalog.models import Brand, Doctor

from .resolver import PlaylistItem, resolve_selection


@dataclass
class SelectionResult:
    """What the picker emits on confirm."""

    playlist: list[PlaylistItem]
    save_as_default: bool
    doctor: Doctor | None = None


@dataclass
class SlideSelection:
    """Mutable picker state over a catalog snapshot."""

    brands: Sequence[Brand]
    selected_ids: set[str] = field(default_factory=set)
    title: str = "Select Slides"
    can_save: bool = False
    save_as_default: bool = False
    doctor: Doctor | None = None

    @classmethod
    def for_doctor(cls, brands: Sequence[Brand], doctor: Doctor) -> SlideSelection:
        """Picker pre-filled with the doctor's saved playlist; saving is allowed."""
        return cls(
            brands=brands,
            selected_ids=set(doctor.saved_slide_ids or []),
            title=f"Customize Pitch for {doctor.name}",
            can_save=True,
            doctor=doctor,
        )

    @classmethod
    def for_brand(cls, brands: Sequence[Brand], brand: Brand) -> SlideSelection:
        return cls(brands=brands, title=f"Select Slides from {brand.name}")

    @property
    def total_slides(self) -> int:
        return sum(b.slide_count for b in self.brands)

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids)

    @property
    def can_confirm(self) -> bool:
        return bool(self.selected_ids)

    def is_selected(self, slide_id: str) -> bool:
        return slide_id in self.selected_ids

    def is_brand_selected(self, brand: Brand) -> bool:
        """True when every slide of the brand is selected (vacuously true when empty)."""
        return all(s.id in self.selected_ids for s in brand.slides)

    def toggle_slide(self, slide_id: str) -> None:
        if slide_id in self.selected_ids:
            self.selected_ids.discard(slide_id)
        else:
            self.selected_ids.add(slide_id)

    def toggle_brand(self, brand: Brand) -> None:
        """Select all of a brand's slides, or clear them if all are already selected."""
        ids = {s.id for s in brand.slides}
        if self.is_brand_selected(brand):
            self.selected_ids -= ids
        else:
            self.selected_ids |= ids

    def select(self, slide_ids: Iterable[str]) -> None:
        self.selected_ids |= set(slide_ids)

    def set_save_as_default(self, value: bool) -> None:
        # Saving only makes sense against a doctor.
        self.save_as_default = value and self.can_save

    def confirm(self) -> SelectionResult:
        """Resolve the chosen ids in catalog order."""
        return SelectionResult(
            playlist=resolve_selection(self.selected_ids, self.brands),
            save_as_default=self.save_as_default,
            doctor=self.doctor,
        )
