"""In-memory content store for brands and doctors.

The store is the single owner of all Brand, Slide and Doctor records. Readers
get the current collection tuples; writers submit whole-entity replacements.
Each mutation swaps in a new tuple, so a reader never observes a partial write.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Iterable

from pharma_pitch.config.logging import get_logger
from pharma_pitch.exceptions import BrandNotFoundError, DoctorNotFoundError

from . import slides as slide_ops
from .models import Brand, Doctor, Slide

logger = get_logger(__name__)


class Collection(str, Enum):
    """The two durable collections the store owns."""

    BRANDS = "brands"
    DOCTORS = "doctors"


ChangeListener = Callable[[Collection], None]


class ContentStore:
    """Catalog (brands) and directory (doctors) with last-write-wins saves by id."""

    def __init__(self, brands: Iterable[Brand] = (), doctors: Iterable[Doctor] = ()):
        self._brands: tuple[Brand, ...] = tuple(brands)
        self._doctors: tuple[Doctor, ...] = tuple(doctors)
        self._listeners: list[ChangeListener] = []

    # -- reads ---------------------------------------------------------------
    @property
    def brands(self) -> tuple[Brand, ...]:
        return self._brands

    @property
    def doctors(self) -> tuple[Doctor, ...]:
        return self._doctors

    def get_brand(self, brand_id: str) -> Brand | None:
        return next((b for b in self._brands if b.id == brand_id), None)

    def get_doctor(self, doctor_id: str) -> Doctor | None:
        return next((d for d in self._doctors if d.id == doctor_id), None)

    def require_brand(self, brand_id: str) -> Brand:
        brand = self.get_brand(brand_id)
        if brand is None:
            raise BrandNotFoundError(f"Brand '{brand_id}' not found")
        return brand

    def require_doctor(self, doctor_id: str) -> Doctor:
        doctor = self.get_doctor(doctor_id)
        if doctor is None:
            raise DoctorNotFoundError(f"Doctor '{doctor_id}' not found")
        return doctor

    def search_doctors(self, term: str) -> list[Doctor]:
        """Case-insensitive substring match on name or specialty."""
        t = term.lower()
        return [d for d in self._doctors if t in d.name.lower() or t in d.specialty.lower()]

    def brands_for_doctor(self, doctor: Doctor) -> list[Brand]:
        """The doctor's assigned brands in catalog order. Stale ids are ignored."""
        return [b for b in self._brands if doctor.is_assigned(b.id)]

    # -- change notification -------------------------------------------------
    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener called after every mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, collection: Collection) -> None:
        for listener in list(self._listeners):
            try:
                listener(collection)
            except Exception:
                logger.exception("Change listener failed for %s", collection.value)

    # -- brand mutators ------------------------------------------------------
    def save_brand(self, brand: Brand) -> Brand:
        """Insert a new brand or replace the one with the same id (position kept)."""
        idx = next((i for i, b in enumerate(self._brands) if b.id == brand.id), -1)
        if idx > -1:
            self._brands = (*self._brands[:idx], brand, *self._brands[idx + 1 :])
        else:
            self._brands = (*self._brands, brand)
        logger.debug("Saved brand %s (%d slides)", brand.id, brand.slide_count)
        self._notify(Collection.BRANDS)
        return brand

    def delete_brand(self, brand_id: str) -> None:
        """Remove a brand by id. Unknown ids are a no-op (no notification)."""
        if self.get_brand(brand_id) is None:
            return
        self._brands = tuple(b for b in self._brands if b.id != brand_id)
        logger.debug("Deleted brand %s", brand_id)
        self._notify(Collection.BRANDS)

    def add_slides(self, brand_id: str, new_slides: Iterable[Slide]) -> Brand:
        return self.save_brand(slide_ops.append_slides(self.require_brand(brand_id), new_slides))

    def remove_slide(self, brand_id: str, slide_id: str) -> Brand:
        return self.save_brand(slide_ops.remove_slide(self.require_brand(brand_id), slide_id))

    def move_slide(self, brand_id: str, slide_id: str, direction: slide_ops.Direction) -> Brand:
        return self.save_brand(
            slide_ops.move_slide(self.require_brand(brand_id), slide_id, direction)
        )

    def reorder_slide(self, brand_id: str, dragged_id: str, target_id: str) -> Brand:
        return self.save_brand(
            slide_ops.reorder_slide(self.require_brand(brand_id), dragged_id, target_id)
        )

    def rename_slide(self, brand_id: str, slide_id: str, name: str) -> Brand:
        return self.save_brand(
            slide_ops.rename_slide(self.require_brand(brand_id), slide_id, name)
        )

    # -- doctor mutators -----------------------------------------------------
    def save_doctor(self, doctor: Doctor) -> Doctor:
        """Insert a new doctor or replace the one with the same id (position kept)."""
        idx = next((i for i, d in enumerate(self._doctors) if d.id == doctor.id), -1)
        if idx > -1:
            self._doctors = (*self._doctors[:idx], doctor, *self._doctors[idx + 1 :])
        else:
            self._doctors = (*self._doctors, doctor)
        logger.debug("Saved doctor %s", doctor.id)
        self._notify(Collection.DOCTORS)
        return doctor

    def delete_doctor(self, doctor_id: str) -> None:
        """Remove a doctor by id. Unknown ids are a no-op (no notification)."""
        if self.get_doctor(doctor_id) is None:
            return
        self._doctors = tuple(d for d in self._doctors if d.id != doctor_id)
        logger.debug("Deleted doctor %s", doctor_id)
        self._notify(Collection.DOCTORS)

    def set_saved_playlist(self, doctor_id: str, slide_ids: Iterable[str]) -> Doctor:
        """Overwrite a doctor's saved playlist with the given slide id sequence."""
        doctor = self.require_doctor(doctor_id)
        return self.save_doctor(doctor.model_copy(update={"saved_slide_ids": tuple(slide_ids)}))
