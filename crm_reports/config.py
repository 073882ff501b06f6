"""
CRM Reports Configuration
=========================
Environment-aware settings using pydantic-settings.
Loads from environment variables or .env files.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment: 'dev' routes all tables to dev schema, 'prod' uses defined schemas
    environment: str = "dev"

    # Supabase
    supabase_url: str = ""
    supabase_service_key: str = ""

    # Population-rate buckets (percent of total records)
    critical_population_threshold: float = 25.0
    good_population_threshold: float = 70.0

    # Share of improved values above which a column counts as improved
    improvement_rate_threshold: float = 0.1

    # Reports scoring below this emit a low-quality event
    min_quality_score: int = 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
