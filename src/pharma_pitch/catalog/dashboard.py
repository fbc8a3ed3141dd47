"""Dashboard summary of the catalog and directory."""

from __future__ import annotations

from dataclasses import dataclass, field

from pharma_pitch.constants import FEATURED_BRANDS_LIMIT, RECENT_DOCTORS_LIMIT

from .models import Brand, Doctor
from .store import ContentStore


@dataclass
class FeaturedBrand:
    brand: Brand
    cover_url: str | None
    slide_count: int


@dataclass
class DashboardSummary:
    doctor_count: int
    brand_count: int
    recent_doctors: list[Doctor] = field(default_factory=list)
    featured_brands: list[FeaturedBrand] = field(default_factory=list)


def summarize(store: ContentStore) -> DashboardSummary:
    """Counts plus the first few doctors and brands for the landing view."""
    featured = []
    for b in store.brands[:FEATURED_BRANDS_LIMIT]:
        cover = b.cover_slide
        featured.append(
            FeaturedBrand(
                brand=b,
                cover_url=cover.display_url if cover else None,
                slide_count=b.slide_count,
            )
        )
    return DashboardSummary(
        doctor_count=len(store.doctors),
        brand_count=len(store.brands),
        recent_doctors=list(store.doctors[:RECENT_DOCTORS_LIMIT]),
        featured_brands=featured,
    )
