"""Configuration settings for the rageshake log capture service."""

from __future__ import annotations

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Durable log store
    database_url: str = Field(
        default="sqlite+aiosqlite:///./rageshake.db",
        description="SQLAlchemy async URL of the log database",
    )

    # Application Configuration
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Capture and retention
    flush_interval_seconds: int = Field(
        default=30,
        description="Seconds between periodic flushes of buffered lines to the store",
    )
    max_log_size_bytes: int = Field(
        default=50 * 1024 * 1024,  # 50 MB
        description="Total size of persisted log text kept across sessions",
    )
    cleanup_on_init: bool = Field(
        default=True,
        description="Prune old sessions once the store has been opened",
    )

    # Bug report submission
    bug_report_endpoint: Optional[str] = Field(default=None)
    app_version: Optional[str] = Field(default=None)
    request_timeout_seconds: int = Field(default=30)

    @field_validator(
        "flush_interval_seconds", "max_log_size_bytes", "request_timeout_seconds"
    )
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Reject zero or negative intervals and budgets."""
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="RAGESHAKE_",
        extra="ignore",  # .env is shared with the host application
    )


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()


# Create a global settings instance lazily
settings: Settings | None = None


def get_global_settings() -> Settings:
    """Get or create the global settings instance."""
    global settings
    if settings is None:
        settings = get_settings()
    return settings
