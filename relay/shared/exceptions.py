"""
Custom Exceptions for the Inbound Email Relay

All exceptions follow the pattern of specific, actionable errors
with context needed for debugging and logging.
"""

from dataclasses import dataclass
from typing import Any


class RelayError(Exception):
    """Base exception for the inbound email relay."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class EmailParseError(RelayError):
    """Raw email bytes could not be turned into a ParsedEmail."""

    error_message: str | None = None

    def __init__(self, error_message: str | None = None) -> None:
        self.error_message = error_message
        super().__init__(
            f"Failed to parse email: {error_message or 'Unknown error'}",
            error_message=error_message,
        )


@dataclass
class ForwardError(RelayError):
    """Forwarding the raw email to one recipient failed."""

    recipient: str
    error_code: str | None = None

    def __init__(
        self,
        recipient: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.recipient = recipient
        self.error_code = error_code
        super().__init__(
            f"Forward to '{recipient}' failed: {error_message or 'Unknown error'}",
            recipient=recipient,
            error_code=error_code,
            error_message=error_message,
        )


@dataclass
class WebhookDeliveryError(RelayError):
    """Webhook endpoint answered with a non-success status."""

    url: str
    status_code: int
    response_body: str | None = None

    def __init__(
        self,
        url: str,
        status_code: int,
        response_body: str | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(
            f"Webhook POST to '{url}' returned {status_code}",
            url=url,
            status_code=status_code,
            response_body=response_body,
        )


@dataclass
class S3Error(RelayError):
    """S3 operation failed."""

    operation: str  # "download"
    bucket: str
    key: str | None = None

    def __init__(
        self,
        operation: str,
        bucket: str,
        key: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.bucket = bucket
        self.key = key
        super().__init__(
            f"S3 {operation} failed for s3://{bucket}/{key or '*'}: "
            f"{error_message or 'Unknown error'}",
            operation=operation,
            bucket=bucket,
            key=key,
            error_message=error_message,
        )


class MarkdownConversionError(RelayError):
    """HTML-to-Markdown conversion produced no usable text."""
