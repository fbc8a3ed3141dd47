"""Upload flows: a new brand from a file, or more slides for an existing brand."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable

from pharma_pitch.catalog.models import Brand, Slide, SlideType, new_brand
from pharma_pitch.catalog.slides import append_slides
from pharma_pitch.config.logging import get_logger
from pharma_pitch.constants import ALLOWED_UPLOAD_EXTS
from pharma_pitch.exceptions import ValidationError

from .analysis import FALLBACK_ANALYSIS, UploadAnalysis, analyze_upload
from .conversion import SlideImage, convert_upload, guess_mime_type, is_pdf

logger = get_logger(__name__)

Analyzer = Callable[[bytes, str], Awaitable[UploadAnalysis]]
Converter = Callable[[bytes, str], list[SlideImage]]


@dataclass(frozen=True)
class UploadedFile:
    name: str
    data: bytes
    mime_type: str

    @property
    def is_pdf(self) -> bool:
        return is_pdf(self.mime_type)

    @classmethod
    def from_path(cls, path: Path) -> UploadedFile:
        """Read an image or PDF from disk.

        Raises:
            ValidationError: If the extension is not an accepted upload type.
        """
        if path.suffix.lower() not in ALLOWED_UPLOAD_EXTS:
            raise ValidationError(
                f"Unsupported file type: {path.suffix or path.name}",
                details=f"Allowed: {', '.join(sorted(ALLOWED_UPLOAD_EXTS))}",
            )
        return cls(name=path.name, data=path.read_bytes(), mime_type=guess_mime_type(path))


async def _convert(upload: UploadedFile, converter: Converter) -> list[SlideImage]:
    return await asyncio.to_thread(converter, upload.data, upload.mime_type)


async def create_brand_from_upload(
    upload: UploadedFile,
    analyzer: Analyzer | None = None,
    converter: Converter | None = None,
) -> Brand:
    """Build a new brand from one upload, named and described by content analysis.

    The first slide image (first page for a PDF) is what gets analyzed.
    """
    images = await _convert(upload, converter or convert_upload)
    if images:
        analysis = await (analyzer or analyze_upload)(images[0].data, images[0].mime_type)
    else:
        logger.warning("No slide images produced from %s", upload.name)
        analysis = FALLBACK_ANALYSIS
    slides = [
        Slide(
            type=SlideType.IMAGE,
            url=img.to_data_url(),
            name=f"Page {i + 1}" if upload.is_pdf else "Main Slide",
            order=i,
        )
        for i, img in enumerate(images)
    ]
    brand = new_brand(
        name=analysis.brand_name or upload.name,
        description=analysis.description or "",
        slides=slides,
    )
    logger.info("Created brand %s from %s with %d slides", brand.name, upload.name, len(slides))
    return brand


async def add_slides_from_upload(
    brand: Brand, upload: UploadedFile, converter: Converter | None = None
) -> Brand:
    """Append the upload's slide images after the brand's existing slides."""
    images = await _convert(upload, converter or convert_upload)
    slides = [
        Slide(
            type=SlideType.IMAGE,
            url=img.to_data_url(),
            name=f"{upload.name} - Pg {i + 1}" if upload.is_pdf else upload.name,
        )
        for i, img in enumerate(images)
    ]
    logger.info("Adding %d slides to brand %s from %s", len(slides), brand.id, upload.name)
    return append_slides(brand, slides)
