"""
Centralized configuration for the lead qualification service.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Brand used in bot greetings
    brand_name: str = Field(default="GrowEasy")

    # Industries
    default_industry: str = Field(default="real_estate")
    industries_directory: Optional[str] = Field(default=None)

    # Finalization: minimum conversation age for industries without field rules
    generic_finalize_after_minutes: float = Field(default=5.0)

    # Database (classification ledger). Unset means in-memory ledger.
    database_url: Optional[str] = Field(default=None)

    # Reporting
    classifications_default_limit: int = Field(default=50)

    # API
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    api_title: str = Field(default="Lead Qualification API")
    api_version: str = Field(default="1.0.0")

    # Logging
    log_level: str = Field(default="INFO")

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url)


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
