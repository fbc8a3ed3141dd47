"""Turn uploaded files into slide images.

Images pass through unchanged. PDFs are rasterised page by page to JPEG.
Conversion never raises: a document that cannot be read yields no images and
an unreadable page is skipped.
"""

from __future__ import annotations

import base64
import io
from dataclasses import dataclass
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image

from pharma_pitch.config.logging import get_logger
from pharma_pitch.constants import MIME_TYPES
from pharma_pitch.exceptions import ConversionError

logger = get_logger(__name__)

DEFAULT_SCALE = 1.5
DEFAULT_JPEG_QUALITY = 85


@dataclass(frozen=True)
class SlideImage:
    data: bytes
    mime_type: str

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


def is_pdf(mime_type: str) -> bool:
    return "pdf" in mime_type.lower()


def guess_mime_type(path: Path) -> str:
    return MIME_TYPES.get(path.suffix.lower(), "application/octet-stream")


def render_pdf_pages(
    data: bytes, scale: float = DEFAULT_SCALE, quality: int = DEFAULT_JPEG_QUALITY
) -> list[SlideImage]:
    """Rasterise every page of a PDF, in page order.

    Raises:
        ConversionError: If the document cannot be opened.
    """
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise ConversionError("Could not open PDF", details=str(e)) from e
    images: list[SlideImage] = []
    with doc:
        for page_no, page in enumerate(doc, start=1):
            try:
                pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
                img = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
                buf = io.BytesIO()
                img.save(buf, format="JPEG", quality=quality)
            except Exception as e:
                logger.warning("Skipping PDF page %d: %s", page_no, e)
                continue
            images.append(SlideImage(buf.getvalue(), "image/jpeg"))
    logger.debug("Rendered %d PDF pages", len(images))
    return images


def convert_upload(
    data: bytes,
    mime_type: str,
    scale: float = DEFAULT_SCALE,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> list[SlideImage]:
    """Slide images for an uploaded file, in page order. Failure yields ``[]``."""
    if not data:
        return []
    if not is_pdf(mime_type):
        return [SlideImage(data, mime_type)]
    try:
        return render_pdf_pages(data, scale=scale, quality=quality)
    except ConversionError as e:
        logger.error("Error converting PDF to images: %s", e)
        return []
