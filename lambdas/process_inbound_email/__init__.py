"""
ProcessInboundEmail Lambda

Relays inbound emails received via SES → SNS.
Forwards the raw email to configured recipients and posts a rendered
summary to chat webhooks, splitting it to fit the per-message limit.

Flow:
    Inbound Email
    → SES Receipt Rule
    → SNS Topic
    → This Lambda
    → SES SendRawEmail (per recipient) + Webhook POSTs (per endpoint)
"""

from lambdas.process_inbound_email.chunker import DISCORD_MESSAGE_LIMIT, chunk_message
from lambdas.process_inbound_email.email_parser import Address, ParsedEmail, parse_email
from lambdas.process_inbound_email.forwarder import forward_email
from lambdas.process_inbound_email.handler import lambda_handler, process_inbound_email
from lambdas.process_inbound_email.message import ForwardableMessage, InboundEmailMessage
from lambdas.process_inbound_email.notifier import send_webhook_notifications
from lambdas.process_inbound_email.renderer import render_body, render_headers, render_message

__all__ = [
    "Address",
    "DISCORD_MESSAGE_LIMIT",
    "ForwardableMessage",
    "InboundEmailMessage",
    "ParsedEmail",
    "chunk_message",
    "forward_email",
    "lambda_handler",
    "parse_email",
    "process_inbound_email",
    "render_body",
    "render_headers",
    "render_message",
    "send_webhook_notifications",
]
