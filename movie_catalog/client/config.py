"""Client-side settings (API location, session file) loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    CATALOG_API_URL: str = "http://localhost:8000"
    CATALOG_SESSION_FILE: Path = Field(
        default_factory=lambda: Path.home() / ".movie_catalog" / "session.json"
    )
    CATALOG_REQUEST_TIMEOUT_SEC: float = 10.0

    @field_validator("CATALOG_API_URL")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        s = (v or "").strip()
        if not (s.lower().startswith("http://") or s.lower().startswith("https://")):
            raise ValueError("CATALOG_API_URL must use http or https (e.g. http://localhost:8000)")
        return s.rstrip("/")

    @field_validator("CATALOG_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0 or v > 120:
            raise ValueError("CATALOG_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 120")
        return v


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
