"""Name and describe uploaded marketing material using Gemini Vision.

Analysis is best-effort: any failure (missing key, API error, unparsable
answer) returns the fixed fallback so an upload never fails because of it.
"""

from __future__ import annotations

import asyncio

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import BaseModel, ConfigDict, Field
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from pharma_pitch.config.logging import get_logger
from pharma_pitch.config.settings import get_settings
from pharma_pitch.constants import FALLBACK_BRAND_NAME, FALLBACK_DESCRIPTION
from pharma_pitch.exceptions import AnalysisError, ConfigurationError

logger = get_logger(__name__)


class UploadAnalysis(BaseModel):
    """What the model tells us about an upload."""

    model_config = ConfigDict(populate_by_name=True)

    brand_name: str = Field(alias="brandName")
    description: str = ""


FALLBACK_ANALYSIS = UploadAnalysis(brand_name=FALLBACK_BRAND_NAME, description=FALLBACK_DESCRIPTION)

_ANALYSIS_PROMPT = (
    "Analyze this pharmaceutical marketing material. Identify the Brand Name and a short "
    "1-sentence description of the promotion. Return as JSON with keys 'brandName' and "
    "'description'."
)

_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "brandName": types.Schema(type=types.Type.STRING),
        "description": types.Schema(type=types.Type.STRING),
    },
    required=["brandName", "description"],
)


def _is_retryable(exc: BaseException) -> bool:
    """429, 5xx and network errors are worth another attempt."""
    if isinstance(exc, genai_errors.ServerError):
        return True
    if isinstance(exc, genai_errors.ClientError):
        return exc.code == 429
    return isinstance(exc, ConnectionError)


def _strip_code_fences(text: str) -> str:
    if not text.startswith("```"):
        return text
    lines = text.split("\n")[1:]
    if lines and lines[-1].strip() == "```":
        lines = lines[:-1]
    return "\n".join(lines)


class ContentAnalyzer:
    """Gemini-backed analyzer. The client is created lazily from settings."""

    def __init__(
        self,
        client: genai.Client | None = None,
        model: str | None = None,
        max_retries: int | None = None,
    ):
        settings = get_settings()
        self._client = client
        self.model = model or settings.analysis_model
        self.max_retries = max_retries or settings.analysis_max_retries

    def _get_client(self) -> genai.Client:
        if self._client is None:
            key = get_settings().gemini_api_key
            if not key:
                raise ConfigurationError("GEMINI_API_KEY is not set")
            self._client = genai.Client(api_key=key, vertexai=False)
        return self._client

    def _generate(self, data: bytes, mime_type: str) -> str:
        client = self._get_client()

        @retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=30),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        def _call():
            return client.models.generate_content(
                model=self.model,
                contents=[types.Part.from_bytes(data=data, mime_type=mime_type), _ANALYSIS_PROMPT],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=_RESPONSE_SCHEMA,
                    temperature=0.1,
                ),
            )

        text = (_call().text or "").strip()
        if not text:
            raise AnalysisError("No response text from Gemini")
        return text

    @staticmethod
    def parse(text: str) -> UploadAnalysis:
        return UploadAnalysis.model_validate_json(_strip_code_fences(text.strip()))

    async def analyze(self, data: bytes, mime_type: str) -> UploadAnalysis:
        """Best-effort name/description for the content; never raises."""
        try:
            if not data:
                raise AnalysisError("No content to analyze")
            text = await asyncio.to_thread(self._generate, data, mime_type)
            result = self.parse(text)
            logger.info("Content analysis complete: %s", result.brand_name)
            return result
        except Exception as e:
            logger.warning("Content analysis failed: %s", e)
            return FALLBACK_ANALYSIS


async def analyze_upload(data: bytes, mime_type: str) -> UploadAnalysis:
    """Analyze with a default, settings-configured analyzer."""
    return await ContentAnalyzer().analyze(data, mime_type)
