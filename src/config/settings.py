"""Application settings using Pydantic Settings.

Centralized configuration for report distribution.

Environment variables are grouped by prefix:
- MAIL_*: mail transport selection and SMTP/SendGrid credentials
- DISTRIBUTION_*: where the distribution list lives and how to read it
- SENDER_*: default sender address and signature name
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class MailSettings(BaseSettings):
    """Mail transport configuration."""

    model_config = SettingsConfigDict(
        env_prefix="MAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: Literal["auto", "smtp", "sendgrid", "null"] = Field(
        default="auto",
        description="Transport to use; 'auto' picks SendGrid, then SMTP, then null",
    )

    # SMTP relay
    smtp_host: Optional[str] = Field(default=None, description="SMTP server hostname")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_username: Optional[str] = Field(default=None, description="SMTP username")
    smtp_password: Optional[str] = Field(default=None, description="SMTP password")
    smtp_use_tls: bool = Field(default=True, description="Use STARTTLS")
    smtp_use_ssl: bool = Field(default=False, description="Use implicit SSL (port 465)")
    smtp_timeout: float = Field(default=30.0, description="Socket timeout in seconds")

    # SendGrid
    sendgrid_api_key: Optional[str] = Field(default=None, description="SendGrid API key")

    @field_validator("provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        """Accept provider names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("smtp_port")
    @classmethod
    def validate_port(cls, v):
        if not 0 < v < 65536:
            raise ValueError("SMTP port must be between 1 and 65535")
        return v


class DistributionSettings(BaseSettings):
    """Distribution list source configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DISTRIBUTION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    list_path: Optional[Path] = Field(default=None, description="Path to the distribution list file")
    role_column: str = Field(default="role", description="Header of the role column")
    address_column: str = Field(default="address", description="Header of the address column")
    delimiter: Optional[str] = Field(default=None, description="Field delimiter (detected when unset)")
    encoding: str = Field(default="utf-8", description="File encoding")

    @field_validator("delimiter", mode="before")
    @classmethod
    def validate_delimiter(cls, v):
        """Empty means auto-detect; '\\t' is accepted for tab."""
        if v is None or v == "":
            return None
        if v == "\\t":
            return "\t"
        if len(v) != 1:
            raise ValueError("Delimiter must be a single character")
        return v


class SenderSettings(BaseSettings):
    """Default sender identity."""

    model_config = SettingsConfigDict(
        env_prefix="SENDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    from_address: Optional[str] = Field(default=None, description="Default From address")
    sender_name: Optional[str] = Field(default=None, description="Name used to sign the email")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    name: str = Field(default="Report Distribution", description="Application name")
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Default log level for the CLI")

    # Nested settings (loaded separately)
    @property
    def mail(self) -> MailSettings:
        return MailSettings()

    @property
    def distribution(self) -> DistributionSettings:
        return DistributionSettings()

    @property
    def sender(self) -> SenderSettings:
        return SenderSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Cached settings loaded from environment.
    """
    return Settings()
