"""Healthwatch configuration with sensible defaults for local development."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Refresh periods offered to the operator, in milliseconds.
ALLOWED_INTERVALS_MS: tuple[int, ...] = (5_000, 10_000, 30_000, 60_000, 300_000)
DEFAULT_INTERVAL_MS = 30_000


def validate_interval_ms(value: int) -> int:
    """Return ``value`` if it is one of the allowed refresh periods."""
    if value not in ALLOWED_INTERVALS_MS:
        allowed = ", ".join(str(ms) for ms in ALLOWED_INTERVALS_MS)
        raise ValueError(f"Refresh interval must be one of {allowed} (got {value})")
    return value


class Settings(BaseSettings):
    """
    Healthwatch configuration.

    All settings can be overridden via environment variables with HEALTHWATCH_ prefix.
    Defaults target a Spring Boot application running on localhost:8080.
    """

    model_config = SettingsConfigDict(
        env_prefix="HEALTHWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Monitoring endpoint base; metrics live under {base_url}/metrics/{name}
    base_url: str = "http://localhost:8080/actuator"

    # Request timeouts
    metric_timeout_seconds: float = 10.0
    probe_timeout_seconds: float = 3.0

    # Polling
    refresh_interval_ms: int = DEFAULT_INTERVAL_MS
    auto_refresh: bool = False

    # Optional HTTP Basic credentials for secured actuator endpoints
    username: str | None = None
    password: str | None = None

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("refresh_interval_ms")
    @classmethod
    def _check_interval(cls, value: int) -> int:
        return validate_interval_ms(value)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
