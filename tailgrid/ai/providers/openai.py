"""OpenAI chat-completions provider.

Requests JSON-object output mode so the reply is a bare JSON object.

Example:
    provider = OpenAIProvider(api_key=os.environ["OPENAI_API_KEY"], model="gpt-4o-mini")
    text = await provider.invoke(system_prompt, "customers in CA")
"""

import logging

import httpx

from tailgrid.ai.config import DEFAULT_MODELS, DEFAULT_OPENAI_ENDPOINT, DEFAULT_TIMEOUT
from tailgrid.ai.providers.http import post_json
from tailgrid.ai.providers.protocol import ProviderKind
from tailgrid.errors.domain import ProviderConfigError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Provider for the OpenAI chat completions API."""

    kind = ProviderKind.OPENAI
    display_name = "OpenAI"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        endpoint: str | None = None,
        temperature: float = 0.0,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        structured: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            api_key: OpenAI API key (required).
            model: Model name. Defaults to gpt-4o-mini.
            endpoint: Full chat-completions URL override.
            temperature: Sampling temperature. Defaults to 0.
            headers: Extra headers merged over the defaults.
            timeout: Request timeout in seconds. Defaults to 30.
            structured: Request response_format json_object.
            transport: Optional httpx transport for tests.

        Raises:
            ProviderConfigError: If api_key is missing.
        """
        if not api_key:
            raise ProviderConfigError.missing("openai", "api_key")
        self._api_key = api_key
        self.model = model or DEFAULT_MODELS["openai"]
        self.endpoint = endpoint or DEFAULT_OPENAI_ENDPOINT
        self.temperature = temperature
        self.headers = dict(headers or {})
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self.structured = structured
        self._transport = transport

    async def invoke(self, system: str, user: str) -> str:
        """Send the prompt pair and return choices[0].message.content."""
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": self.temperature,
        }
        if self.structured:
            body["response_format"] = {"type": "json_object"}

        headers = {"Authorization": f"Bearer {self._api_key}", **self.headers}
        data = await post_json(
            self.endpoint,
            body,
            provider=self.display_name,
            headers=headers,
            timeout=self.timeout,
            transport=self._transport,
        )

        choices = data.get("choices") if isinstance(data, dict) else None
        if not choices:
            logger.warning("OpenAI response had no choices")
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""
