"""Provider for arbitrary JSON-over-HTTP completion endpoints.

Request and response shapes are pluggable. Without a transform_response,
the reply text is found by probing common field names and, failing that,
the whole payload is serialized back to JSON so the response parser can
still look for an object inside it.

Example:
    provider = CustomProvider(
        endpoint="https://my-api.example.com/ai",
        headers={"Authorization": "Bearer ..."},
        prompt_style="single",
        transform_response=lambda payload: payload["output"],
    )
"""

import json
from typing import Any, Callable, Literal

import httpx

from tailgrid.ai.config import DEFAULT_TIMEOUT
from tailgrid.ai.providers.http import post_json
from tailgrid.ai.providers.protocol import ProviderKind
from tailgrid.errors.domain import ProviderConfigError

RequestTransform = Callable[[str, str], Any]
ResponseTransform = Callable[[Any], str]

_TEXT_FIELDS = ("content", "text", "output", "response")


def messages_body(system: str, user: str) -> dict:
    """Role-tagged chat body."""
    return {
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ]
    }


def single_prompt_body(system: str, user: str) -> dict:
    """Single concatenated prompt body."""
    return {"prompt": f"{system}\n\nUser: {user}"}


def extract_text(payload: Any) -> str:
    """Find the reply text in a response payload of unknown shape."""
    if isinstance(payload, str):
        return payload
    if isinstance(payload, dict):
        for key in _TEXT_FIELDS:
            if isinstance(payload.get(key), str):
                return payload[key]
        choices = payload.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            choice = choices[0]
            if isinstance(choice.get("text"), str):
                return choice["text"]
            message = choice.get("message")
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                return message["content"]
    return json.dumps(payload)


class CustomProvider:
    """Provider for a caller-defined endpoint. No structured output mode."""

    kind = ProviderKind.CUSTOM
    display_name = "Custom"

    def __init__(
        self,
        endpoint: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        transform_request: RequestTransform | None = None,
        transform_response: ResponseTransform | None = None,
        prompt_style: Literal["messages", "single"] = "messages",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            endpoint: URL to POST to (required).
            headers: Request headers, including any auth.
            timeout: Request timeout in seconds. Defaults to 30.
            transform_request: Builds the request body from (system, user).
                Overrides prompt_style.
            transform_response: Extracts reply text from the decoded payload.
            prompt_style: "messages" for a role-tagged body, "single" for
                {"prompt": ...}.
            transport: Optional httpx transport for tests.

        Raises:
            ProviderConfigError: If endpoint is missing.
        """
        if not endpoint:
            raise ProviderConfigError.missing("custom", "endpoint")
        self.endpoint = endpoint
        self.headers = dict(headers or {})
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        if transform_request is None:
            transform_request = single_prompt_body if prompt_style == "single" else messages_body
        self._transform_request = transform_request
        self._transform_response = transform_response or extract_text
        self._transport = transport

    async def invoke(self, system: str, user: str) -> str:
        """POST the transformed body and return the transformed reply."""
        data = await post_json(
            self.endpoint,
            self._transform_request(system, user),
            provider=self.display_name,
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
        )
        return self._transform_response(data)
