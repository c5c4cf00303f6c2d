"""
Application configuration using Pydantic Settings.
Loads environment variables and provides type-safe configuration.
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(default="development", description="Current environment")
    debug: bool = Field(default=False, description="Debug mode")

    # API Configuration
    api_title: str = Field(default="Time Tracking Service")
    api_version: str = Field(default="1.0.0")
    api_prefix: str = Field(default="/api/v1")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(default="sqlite:///./timetrack.db", description="SQLAlchemy database URL")
    database_echo: bool = Field(default=False)
    snapshot_isolation_level: str = Field(
        default="REPEATABLE READ",
        description="Isolation level for capacity reads (PostgreSQL only)"
    )

    # Storage retry
    storage_retry_attempts: int = Field(default=1, ge=0)
    storage_retry_delay_seconds: float = Field(default=0.1, ge=0)

    # JWT Configuration
    jwt_secret_key: str = Field(default="development-secret-key-change-in-production", description="JWT secret key")
    jwt_algorithm: str = Field(default="HS256")
    task_hook_scope: str = Field(
        default="tasks:hooks",
        description="Token scope required to report task lifecycle events"
    )
    timecard_export_scope: str = Field(
        default="timecards:export",
        description="Token scope required to export time cards of all users"
    )

    # CORS
    cors_origins: str | List[str] = Field(default="http://localhost:3000,http://localhost:5173")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default=["*"])
    cors_allow_headers: List[str] = Field(default=["*"])

    # Pagination
    default_page_size: int = Field(default=50)
    max_page_size: int = Field(default=100)

    # Time tracking rules
    timezone: str = Field(default="UTC", description="Fallback timezone for users without one")
    max_interval_hours: float = Field(default=24.0, gt=0)
    manual_entry_max_hours: float = Field(default=24.0, gt=0)

    # Sentry (Optional)
    sentry_dsn: Optional[str] = Field(default=None)
    sentry_traces_sample_rate: float = Field(default=0.1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            if not v or v.strip() == "":
                return list(DEFAULT_CORS_ORIGINS)
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return list(DEFAULT_CORS_ORIGINS)
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    def validate_environment(self) -> None:
        """Validate that production-critical settings are not left at their defaults."""
        missing_vars = []
        if not self.database_url or self.database_url.startswith("sqlite"):
            missing_vars.append("DATABASE_URL")
        if self.jwt_secret_key == "development-secret-key-change-in-production":
            missing_vars.append("JWT_SECRET_KEY")

        if missing_vars:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Use this function to get settings throughout the application.
    """
    settings = Settings()

    if settings.is_production:
        settings.validate_environment()

    return settings


settings = get_settings()
