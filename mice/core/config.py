"""Application configuration."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import Optional, Union
import os

from mice.core.constants import (
    ACCESS_TOKEN_EXPIRE_MINUTES as DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES,
    DYNAMIC_QR_TTL_SECONDS as DEFAULT_DYNAMIC_QR_TTL_SECONDS,
    DYNAMIC_QR_REFRESH_SECONDS as DEFAULT_DYNAMIC_QR_REFRESH_SECONDS,
    EVENT_ENTRY_MIN_DURATION_MS as DEFAULT_EVENT_ENTRY_MIN_DURATION_MS,
)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Database - Support both full URL and individual components
    DATABASE_URL: Optional[str] = None
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    AUTO_CREATE_TABLES: bool = False

    # Security
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MINUTES

    # CORS - Can be a list or comma-separated string
    CORS_ORIGINS: Union[list, str] = ["http://localhost:3000"]

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    # Application
    APP_TITLE: str = "MICE Check-in Service"
    APP_DESCRIPTION: str = "Dynamic QR session attendance and event entry for conferences"
    APP_VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: Optional[bool] = None  # Defaults to JSON output in production only

    # Dynamic QR check-in
    DYNAMIC_QR_TTL_SECONDS: int = DEFAULT_DYNAMIC_QR_TTL_SECONDS
    DYNAMIC_QR_REFRESH_SECONDS: int = DEFAULT_DYNAMIC_QR_REFRESH_SECONDS

    # Event entry handlers never answer faster than this
    EVENT_ENTRY_MIN_DURATION_MS: int = DEFAULT_EVENT_ENTRY_MIN_DURATION_MS

    # Token cache
    CACHE_MAX_SIZE: int = 10000
    CACHE_SWEEP_INTERVAL_SECONDS: int = 30

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    REDIS_URL: Optional[str] = None

    # Database Connection Pool Configuration
    DB_POOL_SIZE: int = 15
    DB_MAX_OVERFLOW: int = 25
    DB_POOL_TIMEOUT: int = 10  # Seconds to wait for a pooled connection
    DB_CONNECT_TIMEOUT: int = 5  # Seconds for the driver to open a connection

    @model_validator(mode='after')
    def check_qr_rotation(self) -> "Settings":
        """The display must rotate to a new token before the current one expires."""
        if self.DYNAMIC_QR_TTL_SECONDS <= 0:
            raise ValueError("DYNAMIC_QR_TTL_SECONDS must be positive")
        if not 0 < self.DYNAMIC_QR_REFRESH_SECONDS < self.DYNAMIC_QR_TTL_SECONDS:
            raise ValueError(
                "DYNAMIC_QR_REFRESH_SECONDS must be positive and shorter than "
                "DYNAMIC_QR_TTL_SECONDS"
            )
        return self

    @property
    def use_json_logs(self) -> bool:
        if self.LOG_JSON is not None:
            return self.LOG_JSON
        return self.ENVIRONMENT == "production"

    def get_database_url(self) -> str:
        """
        Get database URL from either DATABASE_URL or individual components.
        Priority: DATABASE_URL > individual components > default (dev only)
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL

        if all([self.POSTGRES_USER, self.POSTGRES_PASSWORD,
                self.POSTGRES_HOST, self.POSTGRES_DB]):
            port = self.POSTGRES_PORT or "5432"
            return (
                f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{port}/{self.POSTGRES_DB}"
            )

        # Development fallback only
        if self.ENVIRONMENT in ("development", "testing"):
            return "sqlite:///./mice.db"

        raise ValueError(
            "Database configuration missing. Provide either DATABASE_URL or "
            "all of: POSTGRES_USER, POSTGRES_PASSWORD, POSTGRES_HOST, POSTGRES_DB"
        )

    def validate_production_config(self) -> None:
        """Validate that production-critical settings are properly configured."""
        if self.ENVIRONMENT == "production":
            issues = []

            if self.SECRET_KEY == "your-secret-key-change-in-production":
                issues.append("SECRET_KEY must be changed from default value")

            if "*" in self.CORS_ORIGINS:
                issues.append("CORS_ORIGINS should be restricted to specific domains")

            if self.AUTO_CREATE_TABLES:
                issues.append("AUTO_CREATE_TABLES must be disabled in production")

            if issues:
                raise ValueError(
                    "Production configuration errors:\n" +
                    "\n".join(f"  - {issue}" for issue in issues)
                )


settings = Settings()

# Validate production configuration on startup
if os.getenv("ENVIRONMENT") == "production":
    settings.validate_production_config()
