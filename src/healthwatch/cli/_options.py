"""Options shared by CLI commands."""

from __future__ import annotations

from healthwatch.config import Settings, get_settings


def resolve_settings(
    base_url: str | None = None,
    interval_ms: int | None = None,
) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    settings = get_settings()
    updates: dict[str, object] = {}
    if base_url:
        updates["base_url"] = base_url.rstrip("/")
    if interval_ms is not None:
        updates["refresh_interval_ms"] = interval_ms
    if not updates:
        return settings
    return settings.model_copy(update=updates)
