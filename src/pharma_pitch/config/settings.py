"""Application settings loaded from the environment and an optional .env file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_data_dir() -> Path:
    return Path.home() / ".pharma-pitch"


class Settings(BaseSettings):
    """Runtime configuration.

    Every field can be overridden with a ``PHARMA_PITCH_`` prefixed variable,
    except the Gemini key which uses the conventional ``GEMINI_API_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="PHARMA_PITCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=_default_data_dir)
    save_debounce_seconds: float = Field(default=1.0, ge=0.0)
    gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    analysis_model: str = "gemini-2.0-flash"
    analysis_max_retries: int = Field(default=3, ge=1)
    pdf_render_scale: float = Field(default=1.5, gt=0.0)
    pdf_jpeg_quality: int = Field(default=85, ge=1, le=100)
    log_level: str = "WARNING"

    @property
    def primary_store_dir(self) -> Path:
        """Directory holding one JSON file per collection."""
        return self.data_dir / "store"

    @property
    def fallback_store_path(self) -> Path:
        """Single-file key/value store consulted when the primary store is empty."""
        return self.data_dir / "local_storage.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def clear_settings_cache() -> None:
    """Clear cached settings (useful in tests after changing env vars)."""
    get_settings.cache_clear()
