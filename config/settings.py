"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on first access.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SUPABASE
    # ===================
    supabase_url: str = Field(
        ...,
        description="Supabase project URL"
    )
    supabase_key: str = Field(
        ...,
        description="Supabase anon/public key"
    )

    # ===================
    # AMAZON SP-API
    # ===================
    sp_api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the SP-API proxy (without /api/amazon)"
    )
    sp_api_rate_limit_ms: int = Field(
        default=500,
        ge=0,
        le=60000,
        description="Minimum delay between the start of consecutive SP-API calls"
    )
    sp_api_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-request timeout for SP-API calls; unset waits for the response"
    )
    sp_api_ship_to_country_code: str = Field(
        default="US",
        min_length=2,
        max_length=2,
        description="Ship-to country used when validating shipment plans"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def sp_api_rate_limit_seconds(self) -> float:
        """Rate limit delay expressed in seconds."""
        return self.sp_api_rate_limit_ms / 1000


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
