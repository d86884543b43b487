"""
Tool implementations for the inbound email relay.

Provides SES forwarding, S3 retrieval and webhook delivery.
"""

from relay.shared.tools.s3 import fetch_object
from relay.shared.tools.ses import forward_raw_email
from relay.shared.tools.webhook import post_webhook_message

__all__ = [
    "fetch_object",
    "forward_raw_email",
    "post_webhook_message",
]
