"""
Configuration management for SWAT readiness scoring.

All environment variables are loaded here with their default values.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment Variable Reference:
    - STORAGE_BACKEND: "memory" (default) or "mongo"
    - MONGODB_URI / MONGODB_DB_NAME: used when STORAGE_BACKEND=mongo
    - REPORTS_DIR: where generated PDF reports are written
    - ENABLE_FALLBACK_SAMPLING: show sample questions for categories that
      resolve to nothing (off by default)
    """

    # Application settings
    app_name: str = "SWAT Readiness Scoring"
    app_version: str = "1.0.0"
    debug: bool = False

    # Storage
    storage_backend: str = "memory"
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "swat_readiness"

    # Reports
    reports_dir: str = "reports"
    tier_report_min_progress: int = 90
    gap_report_min_progress: int = 75

    # Catalog cache settings
    catalog_cache_ttl_seconds: int = 300
    catalog_cache_max_size: int = 128

    # Question resolution
    enable_fallback_sampling: bool = False
    fallback_sample_size: int = 5

    # API client settings
    api_base_url: Optional[str] = None
    save_max_retries: int = 2
    save_backoff_seconds: float = 0.5
    request_timeout_seconds: int = 30

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


# Global settings instance
settings = Settings()
