"""
Email Renderer

Turns a ParsedEmail into the chat message text: a header summary
(Subject/From/To/CC/BCC), a blank line, then the body.
"""

import structlog

from lambdas.process_inbound_email.email_parser import Address, ParsedEmail
from relay.shared.llm.markdown import HtmlToMarkdownConverter

log = structlog.get_logger()

NO_SUBJECT = "No Subject"
NO_ADDRESS = "N/A"
NO_CONTENT = "(No content)"


def format_address(address: Address | None) -> str:
    """Format one mailbox as 'Name <addr>' or '<addr>'."""
    if address is None:
        return NO_ADDRESS
    display_name = f"{address.name} " if address.name else ""
    return f"{display_name}<{address.address}>"


def format_addresses(addresses: list[Address] | None) -> str:
    """Comma-join a mailbox list, N/A when absent or empty."""
    if not addresses:
        return NO_ADDRESS
    return ", ".join(format_address(addr) for addr in addresses)


def render_headers(parsed: ParsedEmail) -> list[str]:
    return [
        f"Subject: {parsed.subject or NO_SUBJECT}",
        f"From: {format_address(parsed.from_address)}",
        f"To: {format_addresses(parsed.to)}",
        f"CC: {format_addresses(parsed.cc)}",
        f"BCC: {format_addresses(parsed.bcc)}",
    ]


async def render_body(
    parsed: ParsedEmail,
    converter: HtmlToMarkdownConverter | None = None,
) -> str:
    """
    Pick the body text to post.

    With an HTML body and a converter, the converted Markdown wins. If
    conversion fails or yields nothing, fall back to the raw HTML, then
    the plain text. Without a converter the plain text is preferred over
    the raw HTML. NO_CONTENT is used when neither body exists.
    """
    if parsed.html and converter is not None:
        try:
            markdown = await converter.to_markdown(parsed.html)
        except Exception as e:
            log.error(
                "markdown_conversion_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            markdown = None

        if markdown and markdown.strip():
            return markdown.strip()

        log.warning("markdown_conversion_unusable", fallback="raw_html")
        return parsed.html or parsed.text or NO_CONTENT

    return parsed.text or parsed.html or NO_CONTENT


async def render_message(
    parsed: ParsedEmail,
    converter: HtmlToMarkdownConverter | None = None,
) -> str:
    """Full message: header block, blank line, body, trimmed."""
    body = await render_body(parsed, converter)
    header_block = "\n".join(render_headers(parsed))
    return f"{header_block}\n\n{body}".strip()
