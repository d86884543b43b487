"""
Unit tests for the email parser.
"""

from unittest.mock import patch

import pytest

from lambdas.process_inbound_email.email_parser import Address, ParsedEmail, parse_email
from relay.shared.exceptions import EmailParseError


class TestParsedEmail:
    """Tests for ParsedEmail dataclass."""

    def test_defaults_are_absent(self):
        parsed = ParsedEmail()

        assert parsed.subject is None
        assert parsed.from_address is None
        assert parsed.to is None
        assert parsed.text is None
        assert parsed.html is None

    def test_parsed_email_frozen(self):
        parsed = ParsedEmail(subject="Hi")

        with pytest.raises(Exception):  # FrozenInstanceError
            parsed.subject = "changed"


class TestParseEmail:
    """Tests for parse_email."""

    def test_plain_text_email(self, raw_email):
        parsed = parse_email(raw_email)

        assert parsed.subject == "Hi"
        assert parsed.from_address == Address(name="A", address="a@example.com")
        assert parsed.to == [Address(name="", address="inbox@example.com")]
        assert parsed.cc is None
        assert parsed.bcc is None
        assert parsed.text.strip() == "hello"
        assert parsed.html is None
        assert parsed.message_id == "<msg-001@example.com>"

    def test_multipart_alternative(self, make_raw_email):
        raw = make_raw_email(text="plain body", html="<p>html body</p>")

        parsed = parse_email(raw)

        assert parsed.text.strip() == "plain body"
        assert parsed.html.strip() == "<p>html body</p>"

    def test_html_only(self, make_raw_email):
        raw = make_raw_email(text=None, html="<b>only html</b>")

        parsed = parse_email(raw)

        assert parsed.text is None
        assert parsed.html.strip() == "<b>only html</b>"

    def test_address_lists(self, make_raw_email):
        raw = make_raw_email(
            to="Jane Doe <jane@example.com>, bob@example.com",
            cc="Ops <ops@example.com>",
            bcc="hidden@example.com",
        )

        parsed = parse_email(raw)

        assert parsed.to == [
            Address(name="Jane Doe", address="jane@example.com"),
            Address(name="", address="bob@example.com"),
        ]
        assert parsed.cc == [Address(name="Ops", address="ops@example.com")]
        assert parsed.bcc == [Address(name="", address="hidden@example.com")]

    def test_missing_subject_and_from(self, make_raw_email):
        raw = make_raw_email(subject=None, from_=None)

        parsed = parse_email(raw)

        assert parsed.subject is None
        assert parsed.from_address is None

    def test_accepts_str_input(self):
        raw = "From: a@example.com\r\nSubject: Str\r\n\r\nbody text\r\n"

        parsed = parse_email(raw)

        assert parsed.subject == "Str"
        assert parsed.from_address == Address(name="", address="a@example.com")
        assert parsed.text.strip() == "body text"

    def test_unknown_charset_falls_back_to_utf8(self):
        raw = (
            b"From: a@example.com\r\n"
            b"Content-Type: text/plain; charset=x-no-such-charset\r\n"
            b"\r\n"
            b"caf\xc3\xa9\r\n"
        )

        parsed = parse_email(raw)

        assert parsed.text.strip() == "café"

    def test_parser_failure_raises_email_parse_error(self, raw_email):
        with patch(
            "lambdas.process_inbound_email.email_parser.email.message_from_bytes",
            side_effect=RuntimeError("boom"),
        ):
            with pytest.raises(EmailParseError) as exc_info:
                parse_email(raw_email)

        assert "boom" in str(exc_info.value)
