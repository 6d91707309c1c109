"""
QueryLens Configuration Management
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "QueryLens"
    app_version: str = "0.1.0"
    environment: str = Field(default="development", pattern="^(development|staging|production|test)$")
    debug: bool = False
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # CORS: JSON list in CORS_ORIGINS, or "*" to allow all
    cors_origins: list[str] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # Logging
    log_to_file: bool = True
    log_file_path: str = "./logs/querylens.log"
    analytics_log_file_path: str = "./logs/analytics.log"
    log_max_bytes: int = Field(default=10_000_000, description="Max log file size in bytes (default 10MB)")
    log_backup_count: int = Field(default=5, description="Number of backup log files to keep")

    # Analytics
    analytics_max_rows: int = Field(
        default=50_000, ge=1, le=1_000_000, description="Largest result set accepted by the analytics API"
    )
    session_max_history: int = Field(
        default=10, ge=1, le=100, description="Analyses kept per conversation tab"
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded once and reused.
    """
    return Settings()


# Global settings instance
settings = get_settings()
