"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded for production)
    - get_settings() is cached (lru_cache) — single instance per process
    - api_base_url never ends with a slash

Design Decisions:
    - API_BASE_URL is the primary variable; NEXT_PUBLIC_API_URL is still
      honoured so existing deployment environments keep working
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    app_name: str = "Zargon Inventory"

    # Backend
    api_base_url: str = Field(
        "http://localhost:5000",
        validation_alias=AliasChoices(
            "API_BASE_URL", "NEXT_PUBLIC_API_URL", "api_base_url",
        ),
    )

    @field_validator("api_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    backend_timeout_seconds: float = 30.0
    backend_max_retries: int = 2
    backend_base_delay_ms: int = 250
    backend_max_delay_ms: int = 4_000

    # Dashboard session cookie
    session_secret: str = "dev-only-insecure-secret"
    session_cookie: str = "zargon_session"
    session_max_age_seconds: int = 24 * 60 * 60  # matches backend JWT lifetime

    # Dashboard polling and paging
    database_poll_seconds: int = 15
    backup_poll_seconds: int = 30
    alerts_poll_seconds: int = 120
    default_page_size: int = 20

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
