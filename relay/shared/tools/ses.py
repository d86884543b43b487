"""
SES Tools

Relays inbound emails to other mailboxes with SES SendRawEmail.

SES only sends mail whose From header is a verified identity, so each
message is re-addressed from the forward source before sending. Replies
still reach the original sender through Reply-To. Body and attachments
are sent untouched, one destination per call.
"""

from email import message_from_bytes
from email.headerregistry import Address
from email.policy import default as default_policy

import boto3
from botocore.exceptions import ClientError
import structlog

from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import ForwardError

log = structlog.get_logger()

# Headers that would break SPF/DKIM alignment once the From is rewritten
FORWARD_DROPPED_HEADERS = ("Return-Path", "Sender", "DKIM-Signature")
FORWARD_DISPLAY_SUFFIX = "via relay"


def _get_client(settings: Settings):
    """Get SES client (own session: forwards run in worker threads)."""
    return boto3.session.Session().client("ses", **settings.ses_config)


def rewrite_for_forwarding(raw_email: bytes, source: str) -> bytes:
    """
    Re-address a raw message so SES accepts it from source.

    Args:
        raw_email: Original message bytes
        source: Verified sender address

    Returns:
        Message bytes with From/Reply-To rewritten
    """
    msg = message_from_bytes(raw_email, policy=default_policy)

    original_from = msg.get("From")
    original_senders = tuple(getattr(original_from, "addresses", ()) or ())

    display_name = ""
    if original_senders:
        sender = original_senders[0]
        display_name = f"{sender.display_name or sender.addr_spec} {FORWARD_DISPLAY_SUFFIX}"

    for header in FORWARD_DROPPED_HEADERS + ("From",):
        del msg[header]

    msg["From"] = Address(display_name=display_name, addr_spec=source)

    # An explicit Reply-To from the sender wins over the From address
    if original_senders and msg.get("Reply-To") is None:
        msg["Reply-To"] = original_senders

    return msg.as_bytes()


def forward_raw_email(
    raw_email: bytes,
    address: str,
    *,
    source: str | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Forward a raw MIME message to a single address.

    Args:
        raw_email: Original message bytes, headers included
        address: Destination mailbox
        source: Verified sender override (default: settings.ses_forward_source)
        settings: Settings override (default: cached settings)

    Returns:
        SES message ID

    Raises:
        ForwardError: If no forward source is configured, or SES rejects
            the message or the call fails
    """
    settings = settings or get_settings()

    envelope_source = source or settings.ses_forward_source
    if not envelope_source:
        raise ForwardError(
            recipient=address,
            error_code="ForwardSourceNotConfigured",
            error_message="RELAY_SES_FORWARD_SOURCE must name a verified SES identity",
        )

    forwarded = rewrite_for_forwarding(raw_email, envelope_source)
    client = _get_client(settings)

    log.debug(
        "forwarding_raw_email",
        to=address,
        source=envelope_source,
        size_bytes=len(forwarded),
    )

    try:
        response = client.send_raw_email(
            Source=envelope_source,
            Destinations=[address],
            RawMessage={"Data": forwarded},
        )
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ForwardError(
            recipient=address,
            error_code=error.get("Code"),
            error_message=error.get("Message", str(e)),
        ) from e

    return response["MessageId"]
