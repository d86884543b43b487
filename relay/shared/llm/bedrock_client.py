"""
Bedrock Markdown Client

Converts HTML email bodies to Markdown with Claude on AWS Bedrock.
The conversion prompt and input cap live here; callers pass raw HTML
and get Markdown text back.
"""

import structlog
from strands import Agent
from strands.models import BedrockModel

from relay.shared.llm.config import LLMSettings, get_llm_settings

log = structlog.get_logger()

MARKDOWN_SYSTEM_PROMPT = """You convert HTML email bodies into clean Markdown for a chat message.
Keep the text, links, lists and tables. Drop styling, tracking pixels and hidden elements.
Respond ONLY with the Markdown, no preamble and no code fences."""


class LLMInvocationError(Exception):
    """Raised when the Bedrock conversion call fails."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.original_error = original_error


class BedrockMarkdownClient:
    """
    Blocking HTML-to-Markdown conversion through a Strands Agent.

    Usage:
        client = BedrockMarkdownClient()
        markdown = client.convert("<h1>Outage</h1><p>API down</p>")
    """

    def __init__(self, settings: LLMSettings | None = None):
        self._settings = settings or get_llm_settings()
        self._model: BedrockModel | None = None

    def _get_model(self) -> BedrockModel:
        if self._model is None:
            model_kwargs = {
                "model_id": self._settings.bedrock_model_id,
                "region_name": self._settings.bedrock_region,
                "temperature": self._settings.llm_temperature,
                "max_tokens": self._settings.llm_max_tokens,
            }
            if self._settings.bedrock_endpoint_url:
                model_kwargs["endpoint_url"] = self._settings.bedrock_endpoint_url

            self._model = BedrockModel(**model_kwargs)
            log.debug(
                "markdown_model_initialized",
                model_id=self._settings.bedrock_model_id,
                region=self._settings.bedrock_region,
            )
        return self._model

    def _cap_input(self, html: str) -> str:
        max_chars = self._settings.markdown_max_input_chars
        if len(html) <= max_chars:
            return html

        log.warning(
            "html_truncated_for_conversion",
            html_length=len(html),
            max_chars=max_chars,
        )
        return html[:max_chars]

    def convert(self, html: str) -> str:
        """
        Convert one HTML document to Markdown.

        Input longer than markdown_max_input_chars is cut before sending.

        Returns:
            Model output with surrounding whitespace removed (may be empty)

        Raises:
            LLMInvocationError: If conversion is disabled or the Bedrock call fails
        """
        if not self._settings.llm_enabled:
            raise LLMInvocationError("HTML conversion is disabled via settings")

        html = self._cap_input(html)

        try:
            # Agents accumulate conversation history; one per document
            agent = Agent(
                model=self._get_model(),
                system_prompt=MARKDOWN_SYSTEM_PROMPT,
                callback_handler=None,
            )
            response = agent(html)
        except Exception as e:
            log.error(
                "markdown_conversion_invoke_error",
                error=str(e),
                error_type=type(e).__name__,
                html_length=len(html),
            )
            raise LLMInvocationError(
                f"Bedrock conversion failed: {e}",
                original_error=e,
            ) from e

        markdown = str(response).strip()
        log.debug(
            "html_converted_to_markdown",
            html_length=len(html),
            markdown_length=len(markdown),
        )
        return markdown
