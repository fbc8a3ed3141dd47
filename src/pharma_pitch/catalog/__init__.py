"""Brand catalog and doctor directory."""

from .models import Brand, Doctor, Slide, SlideType, new_brand, new_doctor, new_id
from .store import Collection, ContentStore

__all__ = [
    "Brand",
    "Doctor",
    "Slide",
    "SlideType",
    "new_brand",
    "new_doctor",
    "new_id",
    "Collection",
    "ContentStore",
]
