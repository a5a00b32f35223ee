"""Application settings.

All credentials and tunables are gathered into one ``Settings`` object that
is passed to the LLM client, pipeline stages, delivery channel, and storage
when they are constructed. Values come from environment variables, which
``load_dotenv`` may populate from a local ``.env`` file.
"""

from __future__ import annotations

import os
import secrets
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

SUPPORTED_PROVIDERS = ("gemini", "openai", "anthropic")

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:5174",
]


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    return float(value) if value not in (None, "") else default


class Settings(BaseModel):
    """Runtime configuration for the writing backend."""

    # LLM
    llm_provider: str = Field(default="gemini", pattern="^(gemini|openai|anthropic)$")
    llm_model: str = ""  # empty means provider default
    llm_timeout_seconds: float = Field(default=60.0, gt=0)
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    generation_temperature: float = Field(default=0.7, ge=0.0, le=2.0)

    # Simulated stages
    quality_check_delay_seconds: float = Field(default=3.0, ge=0)
    export_delay_seconds: float = Field(default=2.0, ge=0)

    # Reference document storage
    uploads_dir: Path = Path("uploads")
    storage_signing_secret: str = Field(default_factory=lambda: secrets.token_hex(32))
    public_base_url: str = ""

    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables."""
        load_dotenv()
        values: dict = {
            "llm_provider": os.environ.get("LLM_PROVIDER", "gemini").lower(),
            "llm_model": os.environ.get("LLM_MODEL", ""),
            "llm_timeout_seconds": _env_float("LLM_TIMEOUT_SECONDS", 60.0),
            "gemini_api_key": os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY"),
            "openai_api_key": os.environ.get("OPENAI_API_KEY"),
            "anthropic_api_key": os.environ.get("ANTHROPIC_API_KEY"),
            "generation_temperature": _env_float("GENERATION_TEMPERATURE", 0.7),
            "quality_check_delay_seconds": _env_float("QUALITY_CHECK_DELAY_SECONDS", 3.0),
            "export_delay_seconds": _env_float("EXPORT_DELAY_SECONDS", 2.0),
            "uploads_dir": Path(os.environ.get("UPLOADS_DIR", "uploads")),
            "public_base_url": os.environ.get("PUBLIC_BASE_URL", "").rstrip("/"),
        }
        if os.environ.get("STORAGE_SIGNING_SECRET"):
            values["storage_signing_secret"] = os.environ["STORAGE_SIGNING_SECRET"]
        if os.environ.get("CORS_ORIGINS"):
            values["cors_origins"] = [
                origin.strip()
                for origin in os.environ["CORS_ORIGINS"].split(",")
                if origin.strip()
            ]
        return cls(**values)

    def api_key_for(self, provider: str) -> str | None:
        """Return the configured API key for a provider name."""
        return {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }.get(provider)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, loaded once from the environment."""
    return Settings.from_env()
