"""
ProcessInboundEmail Lambda Handler

Main entry point for relaying inbound emails.
Parses SNS→SES notifications, forwards the raw email to the configured
recipients and posts a summary to the configured chat webhooks.

Trigger: SNS topic subscribed to SES inbound email rule
Output: SES forwards + webhook POSTs (best effort, never retried)

Flow:
1. Parse SNS notification
2. Load raw email (embedded content or S3 object)
3. Resolve recipients and webhook URLs from settings
4. Run webhook notification and forwarding concurrently
5. Log per-branch failures and report a summary
"""

import asyncio
import base64
import json
import logging
from typing import Any

import httpx
import structlog

from lambdas.process_inbound_email.forwarder import forward_email
from lambdas.process_inbound_email.message import ForwardableMessage, InboundEmailMessage
from lambdas.process_inbound_email.notifier import send_webhook_notifications
from relay.shared.config import Settings, get_settings
from relay.shared.exceptions import S3Error
from relay.shared.llm.markdown import HtmlToMarkdownConverter, build_markdown_converter
from relay.shared.tools.s3 import fetch_object

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.getLogger().setLevel(get_settings().log_level)

log = structlog.get_logger()


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {"statusCode": status_code, "body": json.dumps(body)}


async def process_inbound_email(
    message: ForwardableMessage,
    settings: Settings | None = None,
    *,
    converter: HtmlToMarkdownConverter | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """
    Notify webhooks and forward the email, waiting for both.

    Neither branch can stop the other, and no exception escapes: a branch
    that raises (e.g. unparseable MIME in the webhook branch) is logged
    and reported under "errors".

    Args:
        message: Inbound email
        settings: Settings override (default: cached settings)
        converter: Optional HTML-to-Markdown capability
        http_client: HTTP client override for webhook delivery

    Returns:
        Summary with destination counts, failure counts and branch errors
    """
    settings = settings or get_settings()
    recipients = settings.recipient_list
    webhook_urls = settings.webhook_url_list

    log.info(
        "destinations_resolved",
        recipients=recipients,
        webhook_count=len(webhook_urls),
    )

    webhook_result, forward_result = await asyncio.gather(
        send_webhook_notifications(
            message,
            webhook_urls,
            converter=converter,
            client=http_client,
            timeout=settings.webhook_timeout_seconds,
        ),
        forward_email(message, recipients),
        return_exceptions=True,
    )

    summary: dict[str, Any] = {
        "recipients": len(recipients),
        "webhooks": len(webhook_urls),
        "forward_failures": 0,
        "webhook_failures": 0,
        "errors": [],
    }

    for branch, result, failure_key in (
        ("webhook", webhook_result, "webhook_failures"),
        ("forward", forward_result, "forward_failures"),
    ):
        if isinstance(result, BaseException):
            log.error(
                "inbound_email_branch_failed",
                branch=branch,
                error=str(result),
                error_type=type(result).__name__,
            )
            summary["errors"].append(f"{branch}: {result}")
        else:
            summary[failure_key] = len(result)

    return summary


def _extract_s3_reference(sns_message: dict) -> tuple[str, str] | None:
    """
    Extract S3 bucket/key from SES action if email is stored in S3.

    Returns:
        Tuple of (bucket, key) or None if embedded
    """
    receipt = sns_message.get("receipt", {})
    action = receipt.get("action", {})

    if action.get("type") == "S3":
        return action.get("bucketName"), action.get(
            "objectKey", action.get("objectKeyPrefix", "")
        )

    return None


def _decode_embedded_content(sns_message: dict) -> bytes | None:
    """Raw MIME bytes from the notification's content field, if present."""
    content = sns_message.get("content")
    if not content:
        return None

    encoding = sns_message.get("receipt", {}).get("action", {}).get("encoding", "")
    if encoding.upper() == "BASE64":
        return base64.b64decode(content)
    return content.encode("utf-8")


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    AWS Lambda handler for relaying inbound emails.

    Args:
        event: SNS event containing SES notification
        context: Lambda context

    Returns:
        Response dict with processing status
    """
    request_id = getattr(context, "aws_request_id", "local")

    log.info(
        "processing_inbound_email",
        request_id=request_id,
        event_keys=list(event.keys()),
    )

    try:
        # Handle SNS Records format (Lambda trigger)
        if "Records" in event:
            responses = [
                _process_sns_record(record, request_id) for record in event["Records"]
            ]
            if len(responses) == 1:
                return responses[0]
            return {
                "statusCode": max(r["statusCode"] for r in responses),
                "body": json.dumps([json.loads(r["body"]) for r in responses]),
            }

        # Handle direct SNS message (for testing)
        if "Message" in event:
            return _process_sns_message(json.loads(event["Message"]), request_id)

        # Handle raw SES notification (for testing)
        if "mail" in event or "content" in event:
            return _process_sns_message(event, request_id)

        log.error("unknown_event_format", event_keys=list(event.keys()))
        return _response(400, {"error": "Unknown event format"})

    except Exception as e:
        log.error("lambda_handler_failed", error=str(e), exc_info=True)
        return _response(500, {"error": str(e)})


def _process_sns_record(record: dict[str, Any], request_id: str) -> dict[str, Any]:
    """Process a single SNS record from Lambda event."""
    sns_data = record.get("Sns", {})
    message = sns_data.get("Message", "{}")

    try:
        sns_message = json.loads(message)
    except json.JSONDecodeError as e:
        log.error("sns_message_parse_failed", error=str(e))
        return _response(400, {"error": "Invalid SNS message JSON"})

    return _process_sns_message(sns_message, request_id)


def _process_sns_message(
    sns_message: dict[str, Any], request_id: str
) -> dict[str, Any]:
    """
    Process SES notification from SNS.

    Handles both embedded content and S3 reference modes.
    """
    notification_type = sns_message.get("notificationType")

    # Handle bounce/complaint notifications
    if notification_type in ("Bounce", "Complaint"):
        log.info(
            "received_delivery_notification",
            type=notification_type,
            message_id=sns_message.get("mail", {}).get("messageId"),
        )
        return _response(
            200,
            {
                "status": "skipped",
                "reason": f"{notification_type} notification - not an inbound email",
            },
        )

    settings = get_settings()
    s3_ref = _extract_s3_reference(sns_message)

    if s3_ref:
        bucket, key = s3_ref
        log.info("email_stored_in_s3", bucket=bucket, key=key)

        try:
            raw_email = fetch_object(bucket, key, settings)
        except S3Error as e:
            return _response(500, {"error": f"Failed to fetch email from S3: {e}"})
    else:
        raw_email = _decode_embedded_content(sns_message)

    if not raw_email:
        log.error(
            "email_content_missing",
            message_id=sns_message.get("mail", {}).get("messageId"),
        )
        return _response(400, {"error": "Email content not embedded in SNS message"})

    message = InboundEmailMessage(raw_email, settings=settings)

    summary = asyncio.run(
        process_inbound_email(
            message,
            settings,
            converter=build_markdown_converter(),
        )
    )

    log.info("inbound_email_processed", request_id=request_id, **summary)

    return _response(
        200,
        {
            "status": "processed",
            "message_id": message.get_header("Message-ID"),
            **summary,
        },
    )
