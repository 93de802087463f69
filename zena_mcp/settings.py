"""Application settings using Pydantic BaseSettings."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Planning core settings loaded from ZENA_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ZENA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Conditional tag cache
    cache_enabled: bool = True
    tag_cache_ttl_seconds: int = 3600
    auto_sync_visibility: bool = True

    # Budget tag thresholds (sum of planned cost over root components)
    budget_low_threshold: float = 1_000_000.0
    budget_high_threshold: float = 10_000_000.0

    # Template application
    hours_per_day: float = 8.0
    template_queue_threshold: int = 5000

    # Event bus
    event_history_size: int = 1000

    # MCP server
    snapshot_path: str | None = None
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
