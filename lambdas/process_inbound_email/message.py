"""
Inbound Message Module

The read-only view of one received email: its raw bytes, header lookup
and the ability to forward it unchanged to another mailbox.
"""

from email.parser import BytesHeaderParser
from email.policy import default as default_policy
from typing import Protocol

from relay.shared.config import Settings
from relay.shared.tools.ses import forward_raw_email


class ForwardableMessage(Protocol):
    """What the notifier and forwarder need from an inbound email."""

    @property
    def raw(self) -> bytes:
        ...

    def get_header(self, name: str) -> str | None:
        ...

    def forward(self, address: str) -> str:
        ...


class InboundEmailMessage:
    """
    Raw email received through SES.

    Headers are parsed lazily and only once; the body is never decoded
    here (see email_parser.parse_email).
    """

    def __init__(self, raw: bytes, *, settings: Settings | None = None):
        self._raw = raw
        self._settings = settings
        self._headers = None

    @property
    def raw(self) -> bytes:
        return self._raw

    def get_header(self, name: str) -> str | None:
        if self._headers is None:
            self._headers = BytesHeaderParser(policy=default_policy).parsebytes(self._raw)
        value = self._headers.get(name)
        return str(value) if value is not None else None

    def forward(self, address: str) -> str:
        """
        Relay the message to address via SES, re-addressed from the
        configured forward source.

        Raises:
            ForwardError: If no forward source is configured or SES fails
        """
        return forward_raw_email(self._raw, address, settings=self._settings)

    def __repr__(self) -> str:
        return (
            f"InboundEmailMessage(message_id={self.get_header('Message-ID')!r}, "
            f"size_bytes={len(self._raw)})"
        )
