"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    app_name: str = "lumina-inventory"
    api_version: str = "0.1.0"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Gemini
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("LUMINA_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    )
    gemini_model: str = "gemini-2.5-flash"

    # Catalog
    seed_demo_catalog: bool = True
    strict_validation: bool = False
    batch_low_stock_quantity: int = Field(default=5, ge=0)
    price_chart_limit: int = Field(default=8, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="LUMINA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
