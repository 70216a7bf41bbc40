"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy for permission grants",
        min_length=1,
    )
    notification_database_url: str | None = Field(
        default=None,
        description="Connection URL of the notification store; defaults to DATABASE_URL",
    )
    secret_key: str = Field(
        description="Secret key used to verify JWT bearer credentials", min_length=1
    )
    jwt_algorithm: str = Field(default="HS256", min_length=1)
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )

    kafka_bootstrap_servers: str = Field(default="kafka:9092", min_length=1)
    kafka_notification_topic: str = Field(default="user-notifications", min_length=1)
    kafka_consumer_group: str = Field(default="user-service-group", min_length=1)
    kafka_topic_partitions: int = Field(default=3, gt=0)
    kafka_producer_flush_timeout_seconds: float = Field(default=10.0, gt=0)

    notification_consumer_enabled: bool = True
    consumer_poll_timeout_seconds: float = Field(
        default=1.0,
        description="Upper bound for a single broker poll; also bounds shutdown latency",
        gt=0,
    )
    consumer_retry_backoff_seconds: float = Field(
        default=2.0,
        description="Pause before retrying a message whose notification could not be stored",
        ge=0,
    )
    notification_deduplicate_events: bool = Field(
        default=False,
        description="Skip inserting a notification whose event id is already stored",
    )
    notification_list_limit: int = Field(default=50, gt=0)

    app_timezone: str = "UTC"
    log_level: str = "INFO"
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"]
    )

    @model_validator(mode="after")
    def _validate_log_level(self) -> "Settings":
        self.log_level = self.log_level.upper()
        if self.log_level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"Unsupported LOG_LEVEL '{self.log_level}'")
        return self

    @property
    def notification_store_url(self) -> str:
        """Return the connection URL for the notification store."""

        return self.notification_database_url or self.database_url


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
