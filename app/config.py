"""Configuration settings for the windtrack backend."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("windtrack.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    windtrack_env: str = os.getenv("WINDTRACK_ENV", "local")
    log_level: str = os.getenv("WINDTRACK_LOG_LEVEL", "INFO")

    # Hourly snapshot feed. Point SNAPSHOT_BASE_URL at /api/hour with an empty
    # suffix to route the fetcher through the bundled proxy instead.
    snapshot_base_url: str = os.getenv(
        "SNAPSHOT_BASE_URL", "https://a.windbornesystems.com/treasure"
    )
    snapshot_suffix: str = os.getenv("SNAPSHOT_SUFFIX", ".json")
    snapshot_timeout: float = float(os.getenv("SNAPSHOT_TIMEOUT", "15.0"))
    snapshot_hours: int = int(os.getenv("SNAPSHOT_HOURS", "24"))
    snapshot_max_entities: int = int(os.getenv("SNAPSHOT_MAX_ENTITIES", "300"))

    # Refresh scheduling
    enable_refresh_scheduler: bool = _get_bool("ENABLE_REFRESH_SCHEDULER", default=True)
    refresh_interval_seconds: float = float(os.getenv("REFRESH_INTERVAL_SECONDS", "600"))

    # Proxy passthrough
    upstream_feed_url: str = os.getenv(
        "UPSTREAM_FEED_URL", "https://a.windbornesystems.com/treasure"
    )
    upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT", "15.0"))

    # Weather enrichment
    weather_base_url: str = os.getenv(
        "WEATHER_BASE_URL", "https://api.open-meteo.com/v1/forecast"
    )
    weather_timeout: float = float(os.getenv("WEATHER_TIMEOUT", "10.0"))


settings = Settings()

if settings.snapshot_hours < 1 or settings.snapshot_hours > 24:
    logger.warning(
        "SNAPSHOT_HOURS=%s is outside 1..24; clamping", settings.snapshot_hours
    )
    settings.snapshot_hours = min(max(settings.snapshot_hours, 1), 24)

__all__ = ["settings", "Settings"]
