"""
Configuration Management

Pydantic-settings based configuration for the inbound email relay.
All settings can be overridden via environment variables.
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Double-quoted span, single-quoted span, or a run without whitespace/commas
ENV_LIST_PATTERN = re.compile(r"\"([^\"]*)\"|'([^']*)'|([^\s,]+)")


def parse_env_list(value: str | None) -> list[str]:
    """
    Split a comma/whitespace separated setting into tokens.

    Quoted entries are taken verbatim without their quotes, so
    '"Team A <a@example.com>", b@example.com' yields two tokens.
    A quote that is never closed is kept as a literal character.

    Args:
        value: Raw setting value, may be None

    Returns:
        Tokens in source order (duplicates and empty quoted entries kept)
    """
    if not value:
        return []

    tokens = []
    for match in ENV_LIST_PATTERN.finditer(value):
        token = next((group for group in match.groups() if group is not None), "")
        tokens.append(token)
    return tokens


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables are prefixed with RELAY_ and are case-insensitive.
    Example: RELAY_RECIPIENTS="ops@example.com, 'Jane <jane@example.com>'"
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Destinations (delimited lists, see parse_env_list)
    recipients: str | None = Field(
        default=None,
        description="Addresses the raw email is forwarded to",
    )
    discord_webhooks: str | None = Field(
        default=None,
        description="Webhook URLs that receive the rendered summary",
    )

    # Webhook delivery
    webhook_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="HTTP timeout for each webhook POST",
    )

    # SES Configuration
    ses_forward_source: str | None = Field(
        default=None,
        description="Verified SES identity that forwarded mail is sent from (required with recipients)",
    )
    ses_endpoint_url: str | None = Field(
        default=None,
        description="SES endpoint URL (for local development)",
    )

    # S3 Configuration
    s3_endpoint_url: str | None = Field(
        default=None,
        description="S3 endpoint URL (for local development)",
    )

    # AWS Configuration
    aws_region: str = Field(
        default="us-west-2",
        description="AWS region",
    )

    # Application Configuration
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    @model_validator(mode="after")
    def _require_forward_source(self) -> "Settings":
        """Forwarding needs a verified sender; fail at load time, not per message."""
        if self.recipient_list and not self.ses_forward_source:
            raise ValueError(
                "ses_forward_source (RELAY_SES_FORWARD_SOURCE) is required when "
                "recipients are configured"
            )
        if self.ses_forward_source and "@" not in self.ses_forward_source:
            raise ValueError(
                f"ses_forward_source must be an email address, got {self.ses_forward_source!r}"
            )
        return self

    @property
    def recipient_list(self) -> list[str]:
        """Forward recipients parsed from the raw setting."""
        return parse_env_list(self.recipients)

    @property
    def webhook_url_list(self) -> list[str]:
        """Webhook endpoints parsed from the raw setting."""
        return parse_env_list(self.discord_webhooks)

    @property
    def ses_config(self) -> dict:
        """SES client configuration."""
        config = {"region_name": self.aws_region}
        if self.ses_endpoint_url:
            config["endpoint_url"] = self.ses_endpoint_url
        return config

    @property
    def s3_config(self) -> dict:
        """S3 client configuration."""
        config = {"region_name": self.aws_region}
        if self.s3_endpoint_url:
            config["endpoint_url"] = self.s3_endpoint_url
        return config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses lru_cache to ensure settings are loaded only once.
    Call Settings.model_validate({}) in tests to override.
    """
    return Settings()
