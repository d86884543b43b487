# Shared Infrastructure for the Inbound Email Relay
"""
Shared infrastructure components for the inbound email relay.

This package provides:
- Configuration management and delimited-list parsing
- Tool implementations for SES, S3 and webhooks
- LLM infrastructure for Bedrock HTML-to-Markdown conversion
- Custom exceptions
"""

from relay.shared.config import Settings, get_settings, parse_env_list
from relay.shared.exceptions import (
    EmailParseError,
    ForwardError,
    MarkdownConversionError,
    RelayError,
    S3Error,
    WebhookDeliveryError,
)

__all__ = [
    # Exceptions
    "RelayError",
    "EmailParseError",
    "ForwardError",
    "MarkdownConversionError",
    "S3Error",
    "WebhookDeliveryError",
    # Config
    "Settings",
    "get_settings",
    "parse_env_list",
]
