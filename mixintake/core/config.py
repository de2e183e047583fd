"""Application configuration management using Pydantic Settings."""

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic Settings for type validation and automatic loading
    from .env files and environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Row store database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./mixintake.db",
        description="Async SQLAlchemy URL (sqlite+aiosqlite or postgresql+asyncpg)"
    )
    database_echo: bool = Field(default=False, description="Enable SQLAlchemy SQL logging")
    database_pool_size: int = Field(default=5, ge=1, description="Database connection pool size")
    database_pool_recycle: int = Field(default=3600, ge=300, description="Database pool recycle time in seconds")

    # API server settings
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="API server port")

    # CORS settings (using string for environment variable compatibility)
    cors_origins_str: str = Field(
        default="http://localhost:5173,http://localhost:3000",
        description="Comma-separated CORS origins",
        alias="CORS_ORIGINS"
    )

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    # Development settings
    debug: bool = Field(default=False, description="Enable debug mode")
    reload: bool = Field(default=False, description="Enable auto-reload (development)")
    environment: str = Field(default="production", description="Application environment")

    # Application number settings
    record_id_prefix: str = Field(
        default="UNILAG-CL-",
        min_length=1,
        description="Constant prefix of every application number"
    )
    record_id_scheme: Literal["mode_letter", "rolling_letter", "none"] = Field(
        default="mode_letter",
        description="Letter policy between prefix and counter"
    )
    record_id_max_attempts: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Allocation attempts when a concurrent submission took the same number"
    )

    # Table names in the row store
    sheet_kgm3: str = Field(default="Client Master Sheet - kgm3", description="Main table for kg/m3 submissions")
    sheet_ratio: str = Field(default="Client Master Sheet - Ratio", description="Main table for ratio submissions")
    sheet_admixtures: str = Field(default="Client Admixtures", description="Admixture child table")
    sheet_scms: str = Field(default="Client SCMs", description="SCM child table")

    # Derivation settings
    mix_include_water_term: bool = Field(
        default=False,
        description="Append the w/c ratio as the last term of the mix ratio string"
    )

    @field_validator("log_format")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        """Accept 'text' as an alias of 'console'."""
        v = (v or "json").strip().lower()
        return "console" if v == "text" else v

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from the string configuration."""
        if not self.cors_origins_str.strip():
            return ["http://localhost:5173", "http://localhost:3000"]
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.debug or self.reload or os.getenv("DEV_MODE", "false").lower() == "true"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once
    and cached for subsequent calls.
    """
    return Settings()
