"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # External trip store
    trip_store_url: str = "http://localhost:5000"
    trip_store_timeout_s: float = 4.0

    # Cache
    redis_url: str | None = None
    query_cache_ttl_seconds: int = 300

    # Scheduling policy
    travel_conflict_threshold_min: int = 60
    tie_break_by_order: bool = False

    # Calendar export
    calendar_event_duration_min: int = 120
    calendar_prodid: str = "-//NestMap//Itinerary Export//EN"

    # Health
    enable_outbound_healthcheck: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
