"""
Application configuration using pydantic-settings.

Loads configuration from environment variables with sensible defaults.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Uploads
    max_upload_size_mb: int = 10

    # Comma separated list; empty means local development origins
    cors_origins: str = ""

    # Trip defaults
    default_traveler: str = "Traveler"
    default_currency: str = "EUR"

    # Workbook layout
    sheet_title: str = "Travel Expenses"

    # Importer scan limits
    metadata_scan_rows: int = 30
    header_scan_rows: int = 120

    @property
    def max_upload_size_bytes(self) -> int:
        """Get maximum upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
