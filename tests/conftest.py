"""Shared fixtures: a small catalog and a deterministic scheduler."""

import pytest

from pharma_pitch.catalog.models import Brand, Doctor, Slide
from pharma_pitch.catalog.store import ContentStore


def _make_slide(slide_id: str, order: int = 0, name: str | None = None) -> Slide:
    return Slide(
        id=slide_id,
        url=f"https://cdn.example.com/{slide_id}.png",
        name=name or slide_id,
        order=order,
    )


def _make_brand(brand_id: str, name: str, slide_ids: list[str]) -> Brand:
    return Brand(
        id=brand_id,
        name=name,
        description=f"{name} promo",
        slides=[_make_slide(s, i) for i, s in enumerate(slide_ids)],
        created_at=1_700_000_000_000,
    )


class FakeHandle:
    def __init__(self, when: float, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Scheduler driven by a fake clock so debounce windows need no wall time."""

    def __init__(self):
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def call_later(self, delay, callback):
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled and not h.fired]

    def advance(self, seconds: float):
        self.now += seconds
        due = sorted((h for h in self.pending if h.when <= self.now), key=lambda h: h.when)
        for handle in due:
            handle.fired = True
            handle.callback()


@pytest.fixture
def make_slide():
    """Factory for slides with predictable URLs."""
    return _make_slide


@pytest.fixture
def make_brand():
    """Factory for brands: ``make_brand(id, name, slide_ids)``."""
    return _make_brand


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def brand_a() -> Brand:
    return _make_brand("A", "Cardiovex", ["s1", "s2"])


@pytest.fixture
def brand_b() -> Brand:
    return _make_brand("B", "Neurolax", ["s3"])


@pytest.fixture
def catalog(brand_a, brand_b) -> list[Brand]:
    """Brand A [s1, s2], Brand B [s3]."""
    return [brand_a, brand_b]


@pytest.fixture
def doctor() -> Doctor:
    return Doctor(
        id="d1",
        name="Dr. Jane Smith",
        specialty="Cardiology",
        hospital="St. Mary's",
        assigned_brand_ids=["A", "B"],
    )


@pytest.fixture
def store(catalog, doctor) -> ContentStore:
    return ContentStore(catalog, [doctor])
