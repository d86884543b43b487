"""
LLM Infrastructure for the Inbound Email Relay

Provides AWS Bedrock integration for HTML-to-Markdown conversion.
Uses Strands Agents SDK for model invocation.
"""

from relay.shared.llm.bedrock_client import (
    MARKDOWN_SYSTEM_PROMPT,
    BedrockMarkdownClient,
    LLMInvocationError,
)
from relay.shared.llm.config import LLMSettings, get_llm_settings
from relay.shared.llm.markdown import (
    BedrockMarkdownConverter,
    HtmlToMarkdownConverter,
    build_markdown_converter,
)

__all__ = [
    # Client
    "BedrockMarkdownClient",
    "LLMInvocationError",
    "MARKDOWN_SYSTEM_PROMPT",
    # Settings
    "LLMSettings",
    "get_llm_settings",
    # Conversion
    "BedrockMarkdownConverter",
    "HtmlToMarkdownConverter",
    "build_markdown_converter",
]
