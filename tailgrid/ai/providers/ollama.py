"""Ollama provider for local models via /api/chat."""

import httpx

from tailgrid.ai.config import DEFAULT_MODELS, DEFAULT_OLLAMA_HOST, DEFAULT_TIMEOUTS
from tailgrid.ai.providers.http import post_json
from tailgrid.ai.providers.protocol import ProviderKind


class OllamaProvider:
    """Provider for a local Ollama server.

    Local generation is slower than hosted APIs, so the default timeout
    is 60 seconds.
    """

    kind = ProviderKind.OLLAMA
    display_name = "Ollama"

    def __init__(
        self,
        endpoint: str | None = None,
        model: str | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        structured: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = (endpoint or DEFAULT_OLLAMA_HOST).rstrip("/")
        self.model = model or DEFAULT_MODELS["ollama"]
        self.headers = dict(headers or {})
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUTS["ollama"]
        self.structured = structured
        self._transport = transport

    async def invoke(self, system: str, user: str) -> str:
        """Send the prompt pair and return message.content."""
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "stream": False,
        }
        if self.structured:
            body["format"] = "json"

        data = await post_json(
            f"{self.endpoint}/api/chat",
            body,
            provider=self.display_name,
            headers=self.headers,
            timeout=self.timeout,
            transport=self._transport,
        )
        message = data.get("message") if isinstance(data, dict) else None
        return (message or {}).get("content") or ""
