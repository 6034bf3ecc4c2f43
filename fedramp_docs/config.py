"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.

Every field can be overridden with a FEDRAMP_-prefixed environment
variable (e.g. FEDRAMP_REFRESH=true) or from a local .env file.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://raw.githubusercontent.com/FedRAMP/docs/main/data"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "FedRAMP Documentation"

    # ── Remote source ────────────────────────────────────
    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = 60.0

    # ── Content cache ────────────────────────────────────
    cache_enabled: bool = True
    cache_dir: Path = Field(
        default_factory=lambda: Path.home() / ".cache" / "fedramp-docs"
    )
    cache_ttl_hours: float = 24.0  # 0 → entries never expire

    # ── Ingestion ────────────────────────────────────────
    refresh: bool = False  # bypass cache reads for the whole pass

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FEDRAMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
