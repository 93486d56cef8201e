"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes:
    - DEVELOPMENT: Uses in-memory auth and store services (no keys needed)
    - PRODUCTION: Uses Supabase Auth and the Supabase Postgres database

The ENV_MODE variable controls which services are instantiated when the
application is built, enabling seamless switching between local testing
and production deployment.

Usage:
    from sabor_arte.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock services
    else:
        # Use Supabase
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with in-memory services
        PRODUCTION: Live environment backed by Supabase
        STAGING: Pre-production environment backed by a Supabase project
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (keys, connection strings) should NEVER be committed
    to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # Supabase
        supabase_url: Project URL (https://<ref>.supabase.co)
        supabase_anon_key: Public anon key sent as `apikey`

        # Database
        database_url: Async SQLAlchemy URL of the Supabase Postgres database

        # Hardening
        external_call_timeout: Upper bound in seconds for each auth/store call
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Sabor & Arte API",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=3000,
        description="API server port"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # ==========================================================================
    # SUPABASE AUTH
    # ==========================================================================

    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL"
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Supabase anon (public) API key"
    )

    # ==========================================================================
    # DATABASE
    # ==========================================================================

    database_url: Optional[str] = Field(
        default=None,
        description="Async SQLAlchemy URL (postgresql+psycopg://...)"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )
    database_create_tables: bool = Field(
        default=False,
        description="Create missing tables at startup"
    )

    # ==========================================================================
    # EXTERNAL CALLS
    # ==========================================================================

    external_call_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for each auth or store call"
    )

    # ==========================================================================
    # DEVELOPMENT SESSIONS
    # ==========================================================================

    session_ttl_seconds: int = Field(
        default=3600,
        ge=1,
        description="Lifetime of sessions issued by the in-memory auth service"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def use_real_services(self) -> bool:
        """Check if Supabase services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all settings required by the real services are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_anon_key:
                missing.append("SUPABASE_ANON_KEY")
            if not self.database_url:
                missing.append("DATABASE_URL")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded only once per process so every component built
    at startup sees the same configuration.

    Returns:
        Settings: Configured application settings
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(settings: Optional[Settings] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        settings: Settings to read the debug flag from (defaults to cached settings)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured application logger
    """
    settings = settings or get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-30s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("sabor_arte")

