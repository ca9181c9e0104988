"""
Application configuration from environment variables.
Settings class using pydantic-settings with optional validation.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from backend root so it loads when running from backend/ or project root
_BACKEND_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _BACKEND_ROOT / ".env"

DEFAULT_PERSONS_API_ROOT = "https://lovable-backend.demo.community.intersystems.com/crud2"
DEFAULT_CORS_ORIGIN = "http://localhost:3000"


class Settings(BaseSettings):
    """
    Application settings loaded from environment and .env.
    All fields have defaults for local dev; validate for production.
    """

    # Application
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    # Store as string so env never triggers json.loads; parsed in cors_origins_list.
    cors_origins: str = Field(
        default=DEFAULT_CORS_ORIGIN,
        description="Comma-separated origins or JSON array",
        validation_alias="CORS_ORIGINS",
    )

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Remote persons backend (fixed at deploy time)
    persons_api_root: str = Field(
        default=DEFAULT_PERSONS_API_ROOT,
        description="Base URL of the persons REST backend (without /persons)",
        validation_alias="PERSONS_API_ROOT",
    )
    persons_api_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Transport timeout in seconds for each backend request",
        validation_alias="PERSONS_API_TIMEOUT",
    )

    # Table rendering
    date_display_format: str = Field(
        default="%m/%d/%Y",
        description="strftime pattern used for DOB cells in the persons table",
        validation_alias="DATE_DISPLAY_FORMAT",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def normalize_cors_origins(cls, v: object) -> str:
        """Ensure we always have a string (avoid empty env causing json.loads in pydantic-settings)."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return DEFAULT_CORS_ORIGIN
        if isinstance(v, list):
            return ",".join(str(x).strip() for x in v if str(x).strip())
        return str(v).strip()

    @field_validator("persons_api_root", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated or JSON array string."""
        raw = (self.cors_origins or "").strip()
        if not raw:
            return [DEFAULT_CORS_ORIGIN]
        if raw.startswith("["):
            try:
                parsed = json.loads(raw)
            except json.JSONDecodeError:
                parsed = None
            if isinstance(parsed, list):
                return [x.strip() for x in parsed if isinstance(x, str) and x.strip()]
        return [x.strip() for x in raw.split(",") if x.strip()] or [DEFAULT_CORS_ORIGIN]

    def validate_for_production(self) -> None:
        """
        Call to validate that required env vars are set (e.g. on startup in production).
        Raises ValueError with missing keys.
        """
        missing: List[str] = []
        if not self.persons_api_root:
            missing.append("PERSONS_API_ROOT")
        if not self.cors_origins:
            missing.append("CORS_ORIGINS")
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
