"""Application configuration via pydantic settings."""

from functools import lru_cache
from pathlib import Path

from typing import Any

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application configuration."""

    app_env: str = Field("local", alias="APP_ENV")
    app_name: str = "Reservation Admin API"
    api_v1_prefix: str = "/api/v1"

    database_url: str = Field(
        "sqlite+aiosqlite:///./reservation_admin.db", alias="DATABASE_URL"
    )
    sync_database_url: str | None = Field(default=None, alias="SYNC_DATABASE_URL")

    restaurant_timezone: str = Field("UTC", alias="RESTAURANT_TIMEZONE")
    snapshot_timeout_seconds: float = Field(
        10.0, gt=0, alias="SNAPSHOT_TIMEOUT_SECONDS"
    )
    snapshot_retry_after_seconds: int = Field(5, ge=0, alias="SNAPSHOT_RETRY_AFTER")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    export_redact: bool = Field(True, alias="EXPORT_REDACT")
    auto_confirm_omakase: bool = Field(False, alias="AUTO_CONFIRM_OMAKASE")
    auto_confirm_dining: bool = Field(False, alias="AUTO_CONFIRM_DINING")

    cors_allowlist: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], alias="CORS_ALLOWLIST"
    )
    cors_allow_credentials: bool = Field(default=False, alias="CORS_ALLOW_CREDENTIALS")

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[3] / ".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("cors_allowlist", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()  # type: ignore[call-arg]
