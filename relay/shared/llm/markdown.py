"""
HTML-to-Markdown Conversion

The renderer accepts any object with an async to_markdown(html) method.
BedrockMarkdownConverter is the production implementation; passing None
means the capability is not configured.
"""

import asyncio
from typing import Protocol

from relay.shared.exceptions import MarkdownConversionError
from relay.shared.llm.bedrock_client import BedrockMarkdownClient
from relay.shared.llm.config import LLMSettings, get_llm_settings


class HtmlToMarkdownConverter(Protocol):
    """Turns an HTML document into Markdown text."""

    async def to_markdown(self, html: str) -> str:
        ...


class BedrockMarkdownConverter:
    """Runs the blocking Bedrock conversion off the event loop."""

    def __init__(self, client: BedrockMarkdownClient | None = None):
        self._client = client or BedrockMarkdownClient()

    async def to_markdown(self, html: str) -> str:
        """
        Raises:
            MarkdownConversionError: If the model returns nothing usable
            LLMInvocationError: If the Bedrock call fails
        """
        markdown = await asyncio.to_thread(self._client.convert, html)
        if not markdown:
            raise MarkdownConversionError("Model returned an empty conversion")
        return markdown


def build_markdown_converter(
    settings: LLMSettings | None = None,
) -> HtmlToMarkdownConverter | None:
    """Return the Bedrock converter, or None when conversion is disabled."""
    settings = settings or get_llm_settings()
    if not settings.llm_enabled:
        return None
    return BedrockMarkdownConverter(BedrockMarkdownClient(settings))
