"""Upload ingestion: document conversion and content analysis collaborators."""

from .analysis import FALLBACK_ANALYSIS, ContentAnalyzer, UploadAnalysis, analyze_upload
from .conversion import SlideImage, convert_upload, guess_mime_type, is_pdf
from .upload import UploadedFile, add_slides_from_upload, create_brand_from_upload

__all__ = [
    "FALLBACK_ANALYSIS",
    "ContentAnalyzer",
    "UploadAnalysis",
    "analyze_upload",
    "SlideImage",
    "convert_upload",
    "guess_mime_type",
    "is_pdf",
    "UploadedFile",
    "add_slides_from_upload",
    "create_brand_from_upload",
]
