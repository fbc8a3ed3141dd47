"""Catalog and directory models: brands, their slides, and doctors."""

from __future__ import annotations

import time
from enum import Enum
from typing import Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from pharma_pitch.constants import DEFAULT_HOSPITAL
from pharma_pitch.exceptions import ValidationError


def new_id() -> str:
    """Generate a fresh unique entity id."""
    return str(uuid4())


def now_ms() -> int:
    """Current time as epoch milliseconds (the stored timestamp format)."""
    return int(time.time() * 1000)


class SlideType(str, Enum):
    """How a slide's content reference is displayed."""

    IMAGE = "image"
    PDF = "pdf"


class _Entity(BaseModel):
    """Shared config: immutable records, camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Slide(_Entity):
    """One unit of presentable content with a stable position in its brand."""

    id: str = Field(default_factory=new_id)
    type: SlideType = Field(default=SlideType.IMAGE, description="image or embeddable document")
    url: str = Field(description="URL or data URL of the content")
    thumbnail_url: Optional[str] = Field(default=None, description="Preview image, if any")
    name: str = ""
    order: int = Field(default=0, ge=0, description="Zero-based position in the brand")

    @property
    def display_url(self) -> str:
        """URL to use for previews (thumbnail preferred)."""
        return self.thumbnail_url or self.url


class Brand(_Entity):
    """A named content package owning an ordered sequence of slides."""

    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    slides: Tuple[Slide, ...] = ()
    created_at: int = Field(default_factory=now_ms, description="Epoch milliseconds")

    @property
    def slide_count(self) -> int:
        return len(self.slides)

    @property
    def cover_slide(self) -> Slide | None:
        """First slide, used as the brand's cover in listings."""
        return self.slides[0] if self.slides else None

    def find_slide(self, slide_id: str) -> Slide | None:
        return next((s for s in self.slides if s.id == slide_id), None)


class Doctor(_Entity):
    """A client-directory record with brand assignments and an optional saved playlist."""

    id: str = Field(default_factory=new_id)
    name: str
    specialty: str
    hospital: str = DEFAULT_HOSPITAL
    assigned_brand_ids: Tuple[str, ...] = Field(
        default=(), description="Membership only; order carries no meaning"
    )
    saved_slide_ids: Optional[Tuple[str, ...]] = Field(
        default=None, description="Ordered slide ids of the confirmed custom playlist"
    )

    @field_validator("hospital", mode="before")
    @classmethod
    def _default_hospital(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_HOSPITAL
        return v

    @field_validator("assigned_brand_ids")
    @classmethod
    def _unique_brand_ids(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(v))

    @property
    def has_saved_playlist(self) -> bool:
        return bool(self.saved_slide_ids)

    def is_assigned(self, brand_id: str) -> bool:
        return brand_id in self.assigned_brand_ids

    def with_brand_toggled(self, brand_id: str) -> Doctor:
        """Return a copy with the brand added to or removed from the assignments."""
        if self.is_assigned(brand_id):
            ids = tuple(b for b in self.assigned_brand_ids if b != brand_id)
        else:
            ids = (*self.assigned_brand_ids, brand_id)
        return self.model_copy(update={"assigned_brand_ids": ids})


def new_brand(name: str, description: str = "", slides: list[Slide] | None = None) -> Brand:
    """Create a brand with a fresh id and creation timestamp."""
    return Brand(name=name, description=description, slides=tuple(slides or ()))


def new_doctor(
    name: str,
    specialty: str,
    hospital: str | None = None,
    assigned_brand_ids: list[str] | None = None,
    saved_slide_ids: list[str] | None = None,
    doctor_id: str | None = None,
) -> Doctor:
    """Build a doctor from form input.

    Name and specialty are required. Passing ``doctor_id`` edits an existing
    record; the caller is expected to pass the existing saved playlist so an
    edit never drops it.

    Raises:
        ValidationError: If name or specialty is blank.
    """
    if not name or not name.strip():
        raise ValidationError("Doctor name is required")
    if not specialty or not specialty.strip():
        raise ValidationError("Doctor specialty is required")
    return Doctor(
        id=doctor_id or new_id(),
        name=name.strip(),
        specialty=specialty.strip(),
        hospital=hospital or DEFAULT_HOSPITAL,
        assigned_brand_ids=tuple(assigned_brand_ids or ()),
        saved_slide_ids=None if saved_slide_ids is None else tuple(saved_slide_ids),
    )
