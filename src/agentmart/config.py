"""Application configuration using Pydantic Settings."""

import json
import os
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agentmart.exceptions import MissingBackendKeyError

MIB = 1024 * 1024


def _parse_list(raw: str | None) -> list[str]:
    """Parse a JSON array, a comma-separated list, or a single value."""
    v = raw.strip() if raw else ""
    if not v:
        return []
    if v.startswith("["):
        try:
            parsed = json.loads(v)
            if isinstance(parsed, list):
                return [str(x).strip() for x in parsed if str(x).strip()]
            return [v]
        except json.JSONDecodeError:
            pass
    if "," in v:
        return [item.strip() for item in v.split(",") if item.strip()]
    return [v]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Application
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    PORT: int = 3001
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS - stored as raw string to avoid pydantic-settings JSON parsing issues
    CORS_ORIGINS_RAW: str = Field(
        default='["http://localhost:3000"]',
        validation_alias="CORS_ORIGINS",
    )

    @property
    def CORS_ORIGINS(self) -> list[str]:  # noqa: N802 - matches env var name
        """Parse CORS origins from JSON array, comma-separated, or plain string."""
        return _parse_list(self.CORS_ORIGINS_RAW) or ["http://localhost:3000"]

    # Hosted backend (Supabase)
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str | None = None  # Enables e-mail lookup on the users page
    BACKEND_TIMEOUT_SECONDS: float = 30.0

    @field_validator("SUPABASE_ANON_KEY")
    @classmethod
    def validate_anon_key(cls, v: str, _info: object) -> str:
        """Require the public API key in production."""
        env = os.environ.get("ENVIRONMENT", "development")
        if env == "production" and not v:
            raise MissingBackendKeyError
        return v

    # Agent files
    AGENT_FILES_BUCKET: str = "agents"
    AGENT_FILES_PREFIX: str = "json-files"
    MAX_AGENT_FILE_BYTES: int = 5 * MIB

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Admin access
    # Always promoted to admin on sign-in
    ADMIN_SUPER_USER_EMAILS_RAW: str = Field(
        default="",
        validation_alias="ADMIN_SUPER_USER_EMAILS",
    )

    # Redis (admin form drafts)
    REDIS_URL: str = "redis://localhost:6379"
    DRAFT_TTL_SECONDS: int = 7 * 24 * 3600

    # Payments
    PAYMENT_SIMULATION_DELAY_SECONDS: float = 2.0

    # Rate limits
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str | None = None  # In-memory when unset
    RATE_LIMIT_CONTACT: str = "5/minute"
    RATE_LIMIT_PURCHASE: str = "10/minute"
    RATE_LIMIT_ADMIN: str = "200/minute"

    # Sentry
    SENTRY_DSN: str | None = None
    SENTRY_TRACES_SAMPLE_RATE: float | None = None

    @property
    def admin_emails(self) -> set[str]:
        """Pinned admin e-mails, compared case-insensitively."""
        return {email.lower() for email in _parse_list(self.ADMIN_SUPER_USER_EMAILS_RAW)}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
