"""
Email Parser Module

Parses raw inbound MIME bytes into a ParsedEmail: subject, structured
address lists and the plain-text / HTML bodies.
"""

import email
from dataclasses import dataclass
from email.message import EmailMessage
from email.policy import default as default_policy

import structlog

from relay.shared.exceptions import EmailParseError

log = structlog.get_logger()


@dataclass(frozen=True)
class Address:
    """A mailbox with its (possibly empty) display name."""

    name: str
    address: str


@dataclass(frozen=True)
class ParsedEmail:
    """
    Result of parsing an inbound email.

    Address-list fields are None when the header is absent and an empty
    list when it is present but holds no mailboxes.
    """

    subject: str | None = None
    from_address: Address | None = None
    to: list[Address] | None = None
    cc: list[Address] | None = None
    bcc: list[Address] | None = None
    text: str | None = None
    html: str | None = None
    message_id: str | None = None
    date: str | None = None


def _header_text(msg: EmailMessage, name: str) -> str | None:
    value = msg.get(name)
    return str(value) if value is not None else None


def _header_addresses(msg: EmailMessage, name: str) -> list[Address] | None:
    """Read an address header into Address objects (None if absent)."""
    header = msg.get(name)
    if header is None:
        return None

    addresses = getattr(header, "addresses", None)
    if addresses is None:
        # Unparseable header: keep the raw value as the address
        raw = str(header).strip()
        return [Address(name="", address=raw)] if raw else []

    return [
        Address(name=addr.display_name or "", address=addr.addr_spec)
        for addr in addresses
    ]


def _decode_part(part: EmailMessage) -> str:
    """Decode a text part, tolerating unknown or wrong charsets."""
    try:
        return part.get_content()
    except (LookupError, UnicodeDecodeError):
        payload = part.get_payload(decode=True) or b""
        return payload.decode("utf-8", errors="replace")


def _extract_body(msg: EmailMessage, subtype: str) -> str | None:
    """Return the preferred text/<subtype> body, skipping attachments."""
    part = msg.get_body(preferencelist=(subtype,))
    if part is None:
        return None
    return _decode_part(part)


def parse_email(raw_email: str | bytes) -> ParsedEmail:
    """
    Parse raw email content (MIME format) into structured result.

    Args:
        raw_email: Raw email content as string or bytes

    Returns:
        ParsedEmail with headers and bodies

    Raises:
        EmailParseError: If the message cannot be parsed
    """
    raw_bytes = raw_email.encode("utf-8") if isinstance(raw_email, str) else raw_email

    try:
        msg = email.message_from_bytes(raw_bytes, policy=default_policy)

        from_addresses = _header_addresses(msg, "From")
        parsed = ParsedEmail(
            subject=_header_text(msg, "Subject"),
            from_address=from_addresses[0] if from_addresses else None,
            to=_header_addresses(msg, "To"),
            cc=_header_addresses(msg, "Cc"),
            bcc=_header_addresses(msg, "Bcc"),
            text=_extract_body(msg, "plain"),
            html=_extract_body(msg, "html"),
            message_id=_header_text(msg, "Message-ID"),
            date=_header_text(msg, "Date"),
        )
    except Exception as e:
        log.error("email_parse_failed", error=str(e), error_type=type(e).__name__)
        raise EmailParseError(str(e)) from e

    log.debug(
        "email_parsed",
        message_id=parsed.message_id,
        has_text=parsed.text is not None,
        has_html=parsed.html is not None,
    )

    return parsed
