"""Tests for the upload flows."""

import pytest

from pharma_pitch.constants import FALLBACK_BRAND_NAME
from pharma_pitch.exceptions import ValidationError
from pharma_pitch.ingest.analysis import UploadAnalysis
from pharma_pitch.ingest.conversion import SlideImage
from pharma_pitch.ingest.upload import (
    UploadedFile,
    add_slides_from_upload,
    create_brand_from_upload,
)


class FakeAnalyzer:
    def __init__(self, result: UploadAnalysis):
        self.result = result
        self.calls = []

    async def __call__(self, data, mime_type):
        self.calls.append((data, mime_type))
        return self.result


def _converter(*pages: bytes):
    def convert(data, mime_type):
        return [SlideImage(p, "image/jpeg") for p in pages]

    return convert


PDF = UploadedFile(name="deck.pdf", data=b"%PDF-1.7", mime_type="application/pdf")
PNG = UploadedFile(name="cover.png", data=b"\x89PNG", mime_type="image/png")


class TestUploadedFile:
    def test_from_path(self, tmp_path):
        path = tmp_path / "deck.pdf"
        path.write_bytes(b"%PDF-1.7")
        upload = UploadedFile.from_path(path)
        assert upload.name == "deck.pdf"
        assert upload.is_pdf

    def test_rejects_unsupported_type(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValidationError, match="Unsupported"):
            UploadedFile.from_path(path)


class TestCreateBrand:
    @pytest.mark.asyncio
    async def test_pdf_pages_become_slides(self):
        analyzer = FakeAnalyzer(UploadAnalysis(brand_name="Cardiovex", description="Heart"))
        brand = await create_brand_from_upload(PDF, analyzer, _converter(b"p1", b"p2"))
        assert brand.name == "Cardiovex"
        assert brand.description == "Heart"
        assert [s.name for s in brand.slides] == ["Page 1", "Page 2"]
        assert [s.order for s in brand.slides] == [0, 1]
        assert brand.slides[0].url.startswith("data:image/jpeg;base64,")
        assert analyzer.calls == [(b"p1", "image/jpeg")]

    @pytest.mark.asyncio
    async def test_single_image(self):
        analyzer = FakeAnalyzer(UploadAnalysis(brand_name="Neurolax"))
        brand = await create_brand_from_upload(PNG, analyzer, _converter(b"img"))
        assert [s.name for s in brand.slides] == ["Main Slide"]

    @pytest.mark.asyncio
    async def test_conversion_failure_still_creates_brand(self):
        analyzer = FakeAnalyzer(UploadAnalysis(brand_name="unused"))
        brand = await create_brand_from_upload(PDF, analyzer, _converter())
        assert brand.name == FALLBACK_BRAND_NAME
        assert brand.slides == ()
        assert analyzer.calls == []


class TestAddSlides:
    @pytest.mark.asyncio
    async def test_pdf_pages_appended(self, brand_a):
        brand = await add_slides_from_upload(brand_a, PDF, _converter(b"p1", b"p2"))
        assert [s.name for s in brand.slides[2:]] == ["deck.pdf - Pg 1", "deck.pdf - Pg 2"]
        assert [s.order for s in brand.slides] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_image_named_after_file(self, brand_a):
        brand = await add_slides_from_upload(brand_a, PNG, _converter(b"img"))
        assert brand.slides[-1].name == "cover.png"

    @pytest.mark.asyncio
    async def test_nothing_converted(self, brand_a):
        brand = await add_slides_from_upload(brand_a, PDF, _converter())
        assert [s.id for s in brand.slides] == ["s1", "s2"]
