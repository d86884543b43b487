"""
Forwarder

Relays the original email to every configured recipient. Each address
is attempted independently; one failure never blocks the others.
"""

import asyncio

import structlog

from lambdas.process_inbound_email.message import ForwardableMessage

log = structlog.get_logger()


async def _forward_one(
    message: ForwardableMessage,
    address: str,
) -> tuple[str, Exception] | None:
    try:
        message_id = await asyncio.to_thread(message.forward, address)
    except Exception as e:
        log.error(
            "email_forward_failed",
            recipient=address,
            error=str(e),
            error_type=type(e).__name__,
        )
        return address, e

    log.info("email_forwarded", recipient=address, message_id=message_id)
    return None


async def forward_email(
    message: ForwardableMessage,
    addresses: list[str],
) -> list[tuple[str, Exception]]:
    """
    Forward message to each address concurrently.

    Args:
        message: Inbound email to relay
        addresses: Destination mailboxes

    Returns:
        (address, exception) pairs for the forwards that failed
    """
    results = await asyncio.gather(
        *(_forward_one(message, address) for address in addresses)
    )
    failed = [result for result in results if result is not None]

    log.info(
        "forwarding_complete",
        attempted=len(addresses),
        failed_count=len(failed),
    )

    return failed
