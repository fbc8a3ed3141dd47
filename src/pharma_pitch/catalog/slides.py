"""Slide-sequence mutations on a single brand.

Every function here is pure: it takes a Brand and returns a new Brand (or the
same instance when the request is a no-op). Whenever the slide list is
reshaped, the last step re-derives each slide's ``order`` from its list
position so ``order`` is always a dense zero-based permutation.
"""

from __future__ import annotations

from typing import Iterable, Literal

from .models import Brand, Slide

Direction = Literal["left", "right"]


def renumber(slides: Iterable[Slide]) -> tuple[Slide, ...]:
    """Return the slides with ``order`` equal to their position."""
    return tuple(
        s if s.order == i else s.model_copy(update={"order": i}) for i, s in enumerate(slides)
    )


def _with_slides(brand: Brand, slides: Iterable[Slide]) -> Brand:
    return brand.model_copy(update={"slides": renumber(slides)})


def append_slides(brand: Brand, new_slides: Iterable[Slide]) -> Brand:
    """Append slides after the brand's existing ones."""
    return _with_slides(brand, [*brand.slides, *new_slides])


def remove_slide(brand: Brand, slide_id: str) -> Brand:
    """Remove one slide; unknown ids leave the brand unchanged."""
    if brand.find_slide(slide_id) is None:
        return brand
    return _with_slides(brand, [s for s in brand.slides if s.id != slide_id])


def move_slide(brand: Brand, slide_id: str, direction: Direction) -> Brand:
    """Move a slide one position left or right. Moves past either end are no-ops."""
    idx = next((i for i, s in enumerate(brand.slides) if s.id == slide_id), -1)
    if idx == -1:
        return brand
    target = idx - 1 if direction == "left" else idx + 1
    if target < 0 or target >= len(brand.slides):
        return brand
    slides = list(brand.slides)
    slides.insert(target, slides.pop(idx))
    return _with_slides(brand, slides)


def reorder_slide(brand: Brand, dragged_id: str, target_id: str) -> Brand:
    """Drag-and-drop reorder: the dragged slide takes the target slide's position.

    Both ids must belong to this brand; dropping a slide on itself is a no-op.
    """
    if dragged_id == target_id:
        return brand
    ids = [s.id for s in brand.slides]
    if dragged_id not in ids or target_id not in ids:
        return brand
    old, new = ids.index(dragged_id), ids.index(target_id)
    slides = list(brand.slides)
    slides.insert(new, slides.pop(old))
    return _with_slides(brand, slides)


def rename_slide(brand: Brand, slide_id: str, name: str) -> Brand:
    """Rename a slide. Blank names are ignored; the name is trimmed."""
    name = name.strip()
    if not name or brand.find_slide(slide_id) is None:
        return brand
    slides = tuple(
        s.model_copy(update={"name": name}) if s.id == slide_id else s for s in brand.slides
    )
    return brand.model_copy(update={"slides": slides})
