"""
LLM Configuration Settings

Pydantic-settings based configuration for the Bedrock HTML-to-Markdown
conversion. All settings can be overridden via environment variables
with RELAY_ prefix.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """
    LLM-specific settings for AWS Bedrock integration.

    Conversion is an optional capability: with llm_enabled left at False
    the relay renders the plain-text body instead.

    Environment variables are prefixed with RELAY_ and are case-insensitive.
    Example: RELAY_LLM_ENABLED=true
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=[".env.local", ".env"],  # Try .env.local first
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    llm_enabled: bool = Field(
        default=False,
        description="Convert HTML bodies to Markdown with Bedrock before posting",
    )

    # AWS Bedrock Configuration
    bedrock_model_id: str = Field(
        default="anthropic.claude-3-haiku-20240307-v1:0",
        description="AWS Bedrock model ID for Claude",
    )
    bedrock_region: str = Field(
        default="us-west-2",
        description="AWS region for Bedrock service",
    )
    bedrock_endpoint_url: str | None = Field(
        default=None,
        description="Custom Bedrock endpoint URL (for local testing or VPC endpoints)",
    )

    # LLM Parameters
    llm_temperature: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="LLM sampling temperature (lower = more deterministic)",
    )
    llm_max_tokens: int = Field(
        default=4096,
        gt=0,
        le=100000,
        description="Maximum tokens for LLM response",
    )
    markdown_max_input_chars: int = Field(
        default=100_000,
        gt=0,
        description="HTML beyond this many characters is cut before conversion",
    )


@lru_cache(maxsize=1)
def get_llm_settings() -> LLMSettings:
    """
    Get cached LLM settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    For testing, use LLMSettings() directly with overrides.

    Returns:
        LLMSettings instance with environment variable overrides applied
    """
    return LLMSettings()
