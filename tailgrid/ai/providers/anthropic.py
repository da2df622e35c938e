"""Anthropic (Claude) provider using the official SDK.

Structured mode forces a tool call whose input schema is the AI output
schema, so the model's answer arrives as a parsed object; it is serialized
back to JSON text for the shared response parser.
"""

import json
import logging

from anthropic import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncAnthropic,
)

from tailgrid.ai.config import DEFAULT_MODELS, DEFAULT_TIMEOUT
from tailgrid.ai.models import AI_OUTPUT_JSON_SCHEMA
from tailgrid.ai.providers.protocol import ProviderKind
from tailgrid.errors.domain import ProviderConfigError, ProviderError
from tailgrid.errors.registry import render_message
from tailgrid.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)

TOOL_NAME = "apply_grid_query"


class AnthropicProvider:
    """Provider for the Anthropic messages API."""

    kind = ProviderKind.ANTHROPIC
    display_name = "Anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        endpoint: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        structured: bool = True,
        client: AsyncAnthropic | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: Anthropic API key. Required unless `client` is given.
            model: Model name. Defaults to claude-3-haiku-20240307.
            max_tokens: Reply token cap. Defaults to 1024.
            endpoint: API base URL override.
            headers: Extra default headers.
            timeout: Request timeout in seconds. Defaults to 30.
            structured: Force a tool call carrying the output schema.
            client: Pre-built AsyncAnthropic client (tests inject a mock).

        Raises:
            ProviderConfigError: If neither api_key nor client is given.
        """
        self.model = model or DEFAULT_MODELS["anthropic"]
        self.max_tokens = max_tokens
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self.structured = structured

        if client is None:
            if not api_key:
                raise ProviderConfigError.missing("anthropic", "api_key")
            client = AsyncAnthropic(
                api_key=api_key,
                base_url=endpoint,
                timeout=self.timeout,
                max_retries=0,
                default_headers=headers,
            )
        self._client = client

    async def invoke(self, system: str, user: str) -> str:
        """Send the prompt pair and return the reply as text.

        Returns the forced tool input as JSON in structured mode, else the
        first text block.
        """
        kwargs: dict = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system,
            "messages": [{"role": "user", "content": user}],
        }
        if self.structured:
            kwargs["tools"] = [
                {
                    "name": TOOL_NAME,
                    "description": "Apply filters and sorting to the data grid",
                    "input_schema": AI_OUTPUT_JSON_SCHEMA,
                }
            ]
            kwargs["tool_choice"] = {"type": "tool", "name": TOOL_NAME}

        try:
            response = await self._client.messages.create(**kwargs)
        except APITimeoutError as e:
            raise ProviderError(
                render_message("E-3002", provider=self.display_name, timeout=self.timeout),
                provider=self.display_name,
                code="E-3002",
            ) from e
        except APIConnectionError as e:
            detail = sanitize_error_message(str(e))
            raise ProviderError(
                render_message("E-3003", provider=self.display_name, detail=detail),
                provider=self.display_name,
                code="E-3003",
            ) from e
        except APIStatusError as e:
            body = sanitize_error_message(e.message) or ""
            raise ProviderError(
                render_message(
                    "E-3001", provider=self.display_name, status=e.status_code, body=body
                ),
                provider=self.display_name,
                code="E-3001",
                status_code=e.status_code,
                body=body,
            ) from e

        for block in response.content:
            if block.type == "tool_use" and block.name == TOOL_NAME:
                return json.dumps(block.input)
        for block in response.content:
            if block.type == "text":
                return block.text

        logger.warning("Anthropic response had no text or tool_use content")
        return ""
