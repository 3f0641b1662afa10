"""
Client configuration management using Pydantic Settings.
Supports environment variables and .env files for configuration.
"""

import logging
from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Client settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="CODEL_SMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Codel SMS Client"
    app_version: str = "1.0.0"
    environment: str = Field(default="development")

    # Authentication
    api_token: Optional[str] = Field(default=None)
    default_sender_id: Optional[str] = Field(default=None)

    # Gateway Settings
    base_url: str = Field(default="https://2wcapi.codel.tech")
    single_sms_endpoint: str = "/2wc/single-sms/v1/api"
    single_sms_default_sender_endpoint: str = "/2wc/single-sms/v1/api/default-sender"
    bulk_sms_endpoint: str = "/2wc/bulk-sms/v1/api"
    balance_endpoint: str = "/2wc/balance/v1/api"
    request_timeout: float = Field(default=30.0, gt=0)

    # Message Defaults
    default_country_code: str = Field(default="263")
    default_validity: str = Field(default="03:00", pattern=r"^\d{2}:\d{2}$")

    # Observability
    metrics_enabled: bool = Field(default=True)
    tracing_enabled: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def url_for(self, endpoint: str) -> str:
        """Build an absolute gateway URL for an endpoint path."""
        return f"{self.base_url}/{endpoint.lstrip('/')}"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Export settings instance
settings = get_settings()
