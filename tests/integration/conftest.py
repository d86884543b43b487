"""
Integration test fixtures and configuration.

Integration tests run lambda_handler against moto-backed SES and S3
with webhook traffic captured by an httpx mock transport.
"""

import os
from unittest.mock import patch

import boto3
import httpx
import pytest
from moto import mock_aws

from relay.shared.config import Settings

# Set integration test environment
os.environ["INTEGRATION_TEST"] = "true"

INTEGRATION_BUCKET = "relay-inbound-integration"
INTEGRATION_WEBHOOK = "https://hooks.example.com/relay"
INTEGRATION_RECIPIENTS = ["ops@example.com", "oncall@example.com"]
INTEGRATION_FORWARD_SOURCE = "relay@example.com"


@pytest.fixture
def integration_settings() -> Settings:
    """Relay settings pointing at the integration destinations."""
    return Settings(
        recipients=" ".join(INTEGRATION_RECIPIENTS),
        discord_webhooks=INTEGRATION_WEBHOOK,
        ses_forward_source=INTEGRATION_FORWARD_SOURCE,
        aws_region="us-west-2",
    )


@pytest.fixture
def integration_aws_setup(integration_settings):
    """
    Set up the AWS side of the relay.

    Creates the SES inbound bucket and verifies the sender domain, with
    the handler's settings lookup pinned to integration_settings.
    """
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-west-2")
        ses = boto3.client("ses", region_name="us-west-2")

        s3.create_bucket(
            Bucket=INTEGRATION_BUCKET,
            CreateBucketConfiguration={"LocationConstraint": "us-west-2"},
        )
        ses.verify_domain_identity(Domain="example.com")

        with patch(
            "lambdas.process_inbound_email.handler.get_settings",
            return_value=integration_settings,
        ):
            yield {"s3": s3, "ses": ses, "bucket": INTEGRATION_BUCKET}


@pytest.fixture
def captured_webhooks(webhook_recorder):
    """
    Route the dispatcher's own AsyncClient through the recording transport.

    Yields the RecordingWebhook from the root conftest.
    """
    real_client = httpx.AsyncClient

    def _client(**kwargs):
        return real_client(transport=httpx.MockTransport(webhook_recorder), **kwargs)

    with patch("lambdas.process_inbound_email.notifier.httpx.AsyncClient", side_effect=_client):
        yield webhook_recorder
