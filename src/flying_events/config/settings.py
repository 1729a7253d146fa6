"""
Module: settings.py
Description: Client configuration using pydantic-settings.

Loads credentials, endpoint and retry defaults from FLYING_EVENTS_*
environment variables with validation and defaults. Supports .env
files for local development. Settings are read once when a client is
built; there is no process-wide settings instance.
"""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from flying_events.models.event import Environment
from flying_events.models.policy import RetryPolicy


class ClientSettings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLYING_EVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application credentials
    application_key: str = Field(..., min_length=1, description="Application key")
    application_secret: str = Field(..., min_length=1, description="Application secret")
    environment: Environment = Field(..., description="Target environment (LIVE or TEST)")

    # API settings
    api_base_url: str = Field(
        default="https://app.flying.events",
        description="Base URL of the Flying Events API"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="HTTP timeout in seconds for each API request"
    )
    log_level: str = Field(default="INFO", description="Logging level")

    # Retry settings
    retry_max_attempts: int = Field(default=21, ge=1, description="Attempts per event, first included")
    retry_backoff_factor: float = Field(default=5.0, gt=1, description="Exponential backoff factor")
    retry_min_delay_ms: int = Field(default=60 * 1000, ge=0, description="Delay before the first retry")
    retry_max_delay_ms: int = Field(default=20 * 60 * 1000, ge=0, description="Maximum delay between attempts")
    retry_jitter: bool = Field(default=True, description="Randomize retry delays")

    @field_validator('api_base_url')
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate the API base URL."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError("api_base_url must be a valid HTTP/HTTPS URL")
        return v.rstrip('/')

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @model_validator(mode="after")
    def validate_retry_delays(self) -> "ClientSettings":
        """Validate the retry delay bounds are ordered."""
        if self.retry_max_delay_ms < self.retry_min_delay_ms:
            raise ValueError("retry_max_delay_ms must be greater than or equal to retry_min_delay_ms")
        return self

    def retry_policy(self) -> RetryPolicy:
        """Build the retry policy described by these settings."""
        return RetryPolicy(
            max_attempts=self.retry_max_attempts,
            backoff_factor=self.retry_backoff_factor,
            min_delay_ms=self.retry_min_delay_ms,
            max_delay_ms=self.retry_max_delay_ms,
            jitter=self.retry_jitter,
        )
