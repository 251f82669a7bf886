"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed log levels (module-level so validators can use it).
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Remote users/roles API
    API_BASE_URL: str = "http://localhost:3002"
    API_REQUEST_TIMEOUT_SEC: float = 30.0

    # Response cache: entries older than this are treated as misses
    CACHE_TTL_SEC: float = 300.0

    # Notifications auto-dismiss after this many seconds
    TOAST_DURATION_SEC: float = 5.0

    # Keystrokes are coalesced for this long before a search fetch is issued
    SEARCH_DEBOUNCE_MS: int = 300

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        normalized = (v or "").strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {list(VALID_LOG_LEVELS)}")
        return normalized

    @field_validator("API_BASE_URL")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("API_BASE_URL must be set and non-empty")
        s = v.strip().lower()
        if not (s.startswith("http://") or s.startswith("https://")):
            raise ValueError(
                "API_BASE_URL must use http or https (e.g. http://localhost:3002)"
            )
        return v.strip().rstrip("/")

    @field_validator("API_REQUEST_TIMEOUT_SEC")
    @classmethod
    def validate_api_timeout(cls, v: float) -> float:
        if v <= 0 or v > 300:
            raise ValueError(
                "API_REQUEST_TIMEOUT_SEC must be greater than 0 and at most 300"
            )
        return v

    @field_validator("CACHE_TTL_SEC")
    @classmethod
    def validate_cache_ttl(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("CACHE_TTL_SEC must be greater than 0")
        return v

    @field_validator("TOAST_DURATION_SEC")
    @classmethod
    def validate_toast_duration(cls, v: float) -> float:
        if v <= 0 or v > 60:
            raise ValueError("TOAST_DURATION_SEC must be greater than 0 and at most 60")
        return v

    @field_validator("SEARCH_DEBOUNCE_MS")
    @classmethod
    def validate_search_debounce(cls, v: int) -> int:
        if v < 0 or v > 5000:
            raise ValueError("SEARCH_DEBOUNCE_MS must be between 0 and 5000")
        return v


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
