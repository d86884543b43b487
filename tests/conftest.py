"""
Pytest Configuration and Shared Fixtures

Provides moto AWS mocking, sample emails, SNS events and a recording
webhook transport.
"""

import base64
import json
import os
from email.message import EmailMessage
from typing import Any, Callable

import boto3
import httpx
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["RELAY_AWS_REGION"] = "us-west-2"
os.environ["RELAY_LLM_ENABLED"] = "false"
os.environ["AWS_DEFAULT_REGION"] = "us-west-2"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

TEST_BUCKET = "test-inbound-emails"
VERIFIED_DOMAIN = "example.com"


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-west-2",
    }


@pytest.fixture
def mock_s3(aws_credentials):
    """Create a mocked S3 bucket for SES-stored emails."""
    with mock_aws():
        s3 = boto3.client("s3", **aws_credentials)
        s3.create_bucket(
            Bucket=TEST_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        yield s3


@pytest.fixture
def mock_ses(aws_credentials):
    """Create a mocked SES client with a verified sender domain."""
    with mock_aws():
        ses = boto3.client("ses", **aws_credentials)
        ses.verify_domain_identity(Domain=VERIFIED_DOMAIN)
        yield ses


# --- Email Fixtures ---


@pytest.fixture
def make_raw_email() -> Callable[..., bytes]:
    """Factory building raw MIME bytes from keyword fields."""

    def _create(
        *,
        subject: str | None = "Hi",
        from_: str | None = "A <a@example.com>",
        to: str | None = "inbox@example.com",
        cc: str | None = None,
        bcc: str | None = None,
        text: str | None = "hello",
        html: str | None = None,
        message_id: str = "<msg-001@example.com>",
    ) -> bytes:
        msg = EmailMessage()
        if subject is not None:
            msg["Subject"] = subject
        if from_ is not None:
            msg["From"] = from_
        if to is not None:
            msg["To"] = to
        if cc is not None:
            msg["Cc"] = cc
        if bcc is not None:
            msg["Bcc"] = bcc
        msg["Message-ID"] = message_id

        if text is not None:
            msg.set_content(text)
            if html is not None:
                msg.add_alternative(html, subtype="html")
        elif html is not None:
            msg.set_content(html, subtype="html")

        return msg.as_bytes()

    return _create


@pytest.fixture
def raw_email(make_raw_email) -> bytes:
    """Plain-text email: subject "Hi", from "A <a@example.com>", body "hello"."""
    return make_raw_email()


# --- Event Fixtures ---


@pytest.fixture
def ses_notification(raw_email: bytes) -> dict[str, Any]:
    """SES inbound notification with base64 embedded content."""
    return {
        "notificationType": "Received",
        "mail": {
            "messageId": "ses-msg-001",
            "source": "a@example.com",
            "destination": ["inbox@example.com"],
        },
        "receipt": {
            "action": {
                "type": "SNS",
                "topicArn": "arn:aws:sns:us-west-2:123456789012:inbound-email",
                "encoding": "BASE64",
            },
        },
        "content": base64.b64encode(raw_email).decode("ascii"),
    }


@pytest.fixture
def sns_event(ses_notification: dict[str, Any]) -> dict[str, Any]:
    """Lambda SNS trigger event wrapping the SES notification."""
    return {
        "Records": [
            {
                "EventSource": "aws:sns",
                "Sns": {
                    "Type": "Notification",
                    "Message": json.dumps(ses_notification),
                },
            }
        ]
    }


# --- Webhook Fixtures ---


class RecordingWebhook:
    """httpx transport handler that records every POST it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_by_url: dict[str, int] = {}
        self.error_by_url: dict[str, Exception] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url in self.error_by_url:
            raise self.error_by_url[url]
        status = self.status_by_url.get(url, 204)
        body = "" if status < 400 else '{"message": "rejected"}'
        return httpx.Response(status, text=body)

    def contents_for(self, url: str) -> list[str]:
        return [
            json.loads(request.content)["content"]
            for request in self.requests
            if str(request.url) == url
        ]


@pytest.fixture
def webhook_recorder() -> RecordingWebhook:
    return RecordingWebhook()


@pytest.fixture
def webhook_client_factory(webhook_recorder: RecordingWebhook):
    """Build an AsyncClient routed to the recorder (create inside the event loop)."""

    def _create() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(webhook_recorder))

    return _create
