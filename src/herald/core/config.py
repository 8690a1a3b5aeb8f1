"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class NotificationConfig(BaseSettings):
    """Notification engine configuration."""

    model_config = {"env_prefix": "HERALD_NOTIFICATION_"}

    templates_path: str = "config/notification_templates.yml"


class RealtimeConfig(BaseSettings):
    """Live push connection registry configuration."""

    model_config = {"env_prefix": "HERALD_REALTIME_"}

    shard_count: int = 16
    send_queue_size: int = 100


class AnalyticsConfig(BaseSettings):
    """Analytics aggregation configuration."""

    model_config = {"env_prefix": "HERALD_ANALYTICS_"}

    default_range_days: int = 30


class DatabaseConfig(BaseSettings):
    """Database configuration. Leave ``database_url`` empty for in-memory stores."""

    model_config = {"env_prefix": "HERALD_DB_"}

    database_url: str | None = None
    echo: bool = False
    pool_size: int = 5


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "HERALD_"}

    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    notification: NotificationConfig = Field(default_factory=NotificationConfig)
    realtime: RealtimeConfig = Field(default_factory=RealtimeConfig)
    analytics: AnalyticsConfig = Field(default_factory=AnalyticsConfig)
    db: DatabaseConfig = Field(default_factory=DatabaseConfig)
