"""
Webhook Tools

Posts chat messages to Discord-compatible webhook endpoints.
"""

import httpx
import structlog

from relay.shared.exceptions import WebhookDeliveryError

log = structlog.get_logger()


async def post_webhook_message(
    client: httpx.AsyncClient,
    url: str,
    content: str,
) -> httpx.Response:
    """
    POST one message as {"content": ...} JSON.

    Args:
        client: Shared async HTTP client
        url: Webhook endpoint
        content: Message text, already within the endpoint's size limit

    Returns:
        The successful response

    Raises:
        WebhookDeliveryError: If the endpoint answers with a non-2xx status
        httpx.HTTPError: On transport failures (connect, timeout, ...)
    """
    response = await client.post(url, json={"content": content})

    if not response.is_success:
        raise WebhookDeliveryError(
            url=url,
            status_code=response.status_code,
            response_body=response.text,
        )

    log.debug(
        "webhook_message_posted",
        url=url,
        status_code=response.status_code,
        content_length=len(content),
    )

    return response
