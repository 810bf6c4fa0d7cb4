"""Application settings using Pydantic Settings for configuration management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from dropwin.domain.addresses import DOMAINS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    app_name: str = "DropWin Mail"
    app_version: str = "2.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # API Server
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Mail provider (1secmail-compatible)
    provider_name: str = "1secmail"
    provider_base_url: str = "https://www.1secmail.com/api/v1/"
    provider_timeout_seconds: float = 10.0
    mail_domains: list[str] = Field(default_factory=lambda: list(DOMAINS))

    # Polling
    poll_interval_seconds: float = Field(default=3.0, gt=0)

    # Local persistence
    storage_backend: Literal["sqlite", "memory"] = "sqlite"
    sqlite_db_path: str = "data/dropwin.db"
    storage_key: str = "dropwin_emails"

    @computed_field
    @property
    def poll_interval_ms(self) -> int:
        """Poll interval in milliseconds, as reported to clients."""
        return int(self.poll_interval_seconds * 1000)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
