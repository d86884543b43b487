"""
S3 Tools

Fetches inbound emails that SES stored in S3 instead of embedding
them in the SNS notification.
"""

import boto3
from botocore.exceptions import ClientError
import structlog

from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import S3Error

log = structlog.get_logger()


def _get_client(settings: Settings):
    """Get S3 client."""
    return boto3.client("s3", **settings.s3_config)


def fetch_object(bucket: str, key: str, settings: Settings | None = None) -> bytes:
    """
    Download an object's full content.

    Args:
        bucket: S3 bucket name
        key: S3 object key
        settings: Settings override (default: cached settings)

    Returns:
        Object content as bytes

    Raises:
        S3Error: If the download fails
    """
    log.info("fetching_object_from_s3", bucket=bucket, key=key)

    client = _get_client(settings or get_settings())

    try:
        response = client.get_object(Bucket=bucket, Key=key)
        content = response["Body"].read()
    except ClientError as e:
        log.error(
            "s3_fetch_failed",
            bucket=bucket,
            key=key,
            error=str(e),
        )
        raise S3Error(
            operation="download",
            bucket=bucket,
            key=key,
            error_message=str(e),
        ) from e

    log.debug(
        "object_fetched_from_s3",
        bucket=bucket,
        key=key,
        size_bytes=len(content),
    )

    return content

