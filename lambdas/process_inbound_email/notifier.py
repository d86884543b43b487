"""
Notification Dispatcher

Parses and renders the inbound email once, splits it into webhook-sized
chunks, and posts every chunk to every endpoint. Endpoints are served
concurrently; chunks for one endpoint go out in order.
"""

import asyncio

import httpx
import structlog

from lambdas.process_inbound_email.chunker import DISCORD_MESSAGE_LIMIT, chunk_message
from lambdas.process_inbound_email.email_parser import parse_email
from lambdas.process_inbound_email.message import ForwardableMessage
from lambdas.process_inbound_email.renderer import render_message
from relay.shared.config import get_settings
from relay.shared.exceptions import WebhookDeliveryError
from relay.shared.llm.markdown import HtmlToMarkdownConverter
from relay.shared.tools.webhook import post_webhook_message

log = structlog.get_logger()


async def _deliver_to_endpoint(
    client: httpx.AsyncClient,
    url: str,
    chunks: list[str],
) -> list[tuple[str, Exception]]:
    """Send chunks to one endpoint sequentially, recording failures."""
    failed: list[tuple[str, Exception]] = []

    for index, chunk in enumerate(chunks):
        try:
            await post_webhook_message(client, url, chunk)
        except WebhookDeliveryError as e:
            log.error(
                "webhook_delivery_failed",
                url=url,
                chunk_index=index,
                status_code=e.status_code,
                response_body=e.response_body,
            )
            failed.append((url, e))
        except httpx.HTTPError as e:
            log.error(
                "webhook_request_error",
                url=url,
                chunk_index=index,
                error=str(e),
                error_type=type(e).__name__,
            )
            failed.append((url, e))

    return failed


async def send_webhook_notifications(
    message: ForwardableMessage,
    webhook_urls: list[str],
    *,
    converter: HtmlToMarkdownConverter | None = None,
    client: httpx.AsyncClient | None = None,
    limit: int = DISCORD_MESSAGE_LIMIT,
    timeout: float | None = None,
) -> list[tuple[str, Exception]]:
    """
    Post a summary of message to each webhook.

    Args:
        message: Inbound email
        webhook_urls: Endpoints to notify
        converter: Optional HTML-to-Markdown capability
        client: HTTP client to reuse (one is created when omitted)
        limit: Maximum characters per posted message
        timeout: HTTP timeout for an owned client (default: settings)

    Returns:
        (url, exception) pairs for every chunk that could not be delivered

    Raises:
        EmailParseError: If the raw email cannot be parsed
    """
    if not webhook_urls:
        log.info("no_webhooks_configured")
        return []

    parsed = parse_email(message.raw)
    full_message = await render_message(parsed, converter)
    chunks = chunk_message(full_message, limit)

    log.info(
        "sending_webhook_notifications",
        endpoint_count=len(webhook_urls),
        chunk_count=len(chunks),
        message_length=len(full_message),
    )

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(
            timeout=timeout if timeout is not None else get_settings().webhook_timeout_seconds
        )

    try:
        results = await asyncio.gather(
            *(_deliver_to_endpoint(client, url, chunks) for url in webhook_urls)
        )
    finally:
        if owns_client:
            await client.aclose()

    failed = [failure for endpoint_failures in results for failure in endpoint_failures]

    log.info(
        "webhook_notifications_complete",
        sent=len(webhook_urls) * len(chunks) - len(failed),
        failed_count=len(failed),
    )

    return failed
