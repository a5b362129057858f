"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    YANG_BROWSER_LOG_LEVEL: str = Field(default="info")
    YANG_BROWSER_LOG_DIR: Path | None = Field(default=None)
    DATA_DIR: Path = Field(default=Path("/data"))

    # Local YANG repositories
    UPLOADS_DIR: Path = Field(default=Path("../uploads"))

    # NSP connectivity
    NSP_VERIFY_TLS: bool = Field(default=True)
    NSP_HTTP_TIMEOUT_SECONDS: float = Field(default=30.0)
    NSP_RENEWAL_MARGIN_SECONDS: float = Field(default=10.0)
    NSP_SEARCH_PAGE_SIZE: int = Field(default=300, ge=1)
    NSP_SEARCH_MAX_PAGES: int = Field(default=100, ge=1)

    CORS_ALLOW_ORIGINS: list[str] = Field(default_factory=lambda: ["*"])


settings = Settings()
config = settings


__all__ = ["Settings", "settings", "config"]
