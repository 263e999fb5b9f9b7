"""
Application settings using Pydantic BaseSettings.
"""

from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "CampusGig Marketplace Service"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    # "json", "console", or "auto" (JSON in production and staging)
    LOG_FORMAT: str = "auto"

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: Union[str, List[str]] = "*"
    USER_ID_HEADER: str = "X-User-Id"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./campusgig.db"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_ECHO: bool = False
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600
    DATABASE_CREATE_TABLES: bool = False

    # Marketplace rules
    JOB_TITLE_MAX_LENGTH: int = 200
    NOTIFICATION_PAGE_SIZE: int = 50

    # Sync layer (client-side read cache)
    SYNC_FEED_INTERVAL_SECONDS: float = 30.0
    SYNC_UNREAD_INTERVAL_SECONDS: float = 15.0
    SYNC_DEDUPE_INTERVAL_SECONDS: float = 2.0

    # Client
    API_BASE_URL: str = "http://localhost:8000"
    HTTP_TIMEOUT: float = 30.0

    # Monitoring
    ENABLE_METRICS: bool = True
    HEALTH_CHECK_TIMEOUT: int = 5

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return ["*"]

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ["development", "staging", "production", "test"]:
            raise ValueError(
                "Environment must be one of: development, staging, production, test"
            )
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ["json", "console", "auto"]:
            raise ValueError("Log format must be one of: json, console, auto")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.DATABASE_URL.startswith("sqlite")

    model_config = {"env_file": ".env", "case_sensitive": True, "extra": "ignore"}


# Global settings instance
settings = Settings()
