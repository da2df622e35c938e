"""Tests for provider backends — mocked HTTP transports and SDK client."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from tailgrid.ai.providers import (
    AnthropicProvider,
    CustomProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderKind,
    extract_text,
)
from tailgrid.ai.providers.anthropic import TOOL_NAME
from tailgrid.ai.providers.custom import single_prompt_body
from tailgrid.errors import ProviderConfigError, ProviderError


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, status: int = 200, body=None, text: str | None = None):
        self.requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=body)

        super().__init__(handler)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


def _raising_transport(exc_type):
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc_type("boom", request=request)

    return httpx.MockTransport(handler)


class TestOpenAIProvider:

    @pytest.mark.asyncio
    async def test_invoke_returns_message_content(self):
        transport = RecordingTransport(body={"choices": [{"message": {"content": '{"a": 1}'}}]})
        provider = OpenAIProvider(api_key="sk-test-key-123456", transport=transport)

        text = await provider.invoke("system text", "user text")

        assert text == '{"a": 1}'
        request = transport.requests[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test-key-123456"
        body = transport.last_json
        assert body["model"] == "gpt-4o-mini"
        assert body["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]
        assert body["temperature"] == 0.0
        assert body["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_unstructured_mode_omits_response_format(self):
        transport = RecordingTransport(body={"choices": [{"message": {"content": "x"}}]})
        provider = OpenAIProvider(api_key="k", structured=False, transport=transport)
        await provider.invoke("s", "u")
        assert "response_format" not in transport.last_json

    @pytest.mark.asyncio
    async def test_extra_headers_merged(self):
        transport = RecordingTransport(body={"choices": [{"message": {"content": "x"}}]})
        provider = OpenAIProvider(
            api_key="k", headers={"OpenAI-Organization": "org-1"}, transport=transport
        )
        await provider.invoke("s", "u")
        assert transport.requests[0].headers["OpenAI-Organization"] == "org-1"

    @pytest.mark.asyncio
    async def test_no_choices_returns_empty_text(self):
        provider = OpenAIProvider(api_key="k", transport=RecordingTransport(body={"choices": []}))
        assert await provider.invoke("s", "u") == ""

    def test_missing_api_key(self):
        with pytest.raises(ProviderConfigError) as exc_info:
            OpenAIProvider(api_key=None)
        assert exc_info.value.code == "E-4001"

    def test_kind(self):
        assert OpenAIProvider(api_key="k").kind is ProviderKind.OPENAI


class TestTransportErrors:

    @pytest.mark.asyncio
    async def test_non_2xx_carries_status_and_body(self):
        transport = RecordingTransport(status=401, text="invalid api_key=sk-abcdefghijkl")
        provider = OpenAIProvider(api_key="k", transport=transport)

        with pytest.raises(ProviderError) as exc_info:
            await provider.invoke("s", "u")

        error = exc_info.value
        assert error.code == "E-3001"
        assert error.status_code == 401
        assert str(error).startswith("OpenAI API error: 401 - ")
        assert "sk-abcdefghijkl" not in str(error)

    @pytest.mark.asyncio
    async def test_redirect_is_an_error(self):
        """3xx replies are not followed and never read as model output."""
        transport = RecordingTransport(
            status=302, body={"choices": [{"message": {"content": "hi"}}]}
        )
        provider = OpenAIProvider(api_key="k", transport=transport)

        with pytest.raises(ProviderError) as exc_info:
            await provider.invoke("s", "u")

        assert exc_info.value.code == "E-3001"
        assert exc_info.value.status_code == 302

    @pytest.mark.asyncio
    async def test_timeout(self):
        provider = OpenAIProvider(
            api_key="k", timeout=5, transport=_raising_transport(httpx.ReadTimeout)
        )
        with pytest.raises(ProviderError) as exc_info:
            await provider.invoke("s", "u")
        assert exc_info.value.code == "E-3002"
        assert str(exc_info.value) == "OpenAI request timed out after 5s"

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        provider = OllamaProvider(transport=_raising_transport(httpx.ConnectError))
        with pytest.raises(ProviderError) as exc_info:
            await provider.invoke("s", "u")
        assert exc_info.value.code == "E-3003"
        assert exc_info.value.provider == "Ollama"

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        provider = CustomProvider(
            endpoint="https://ai.example.com/run",
            transport=RecordingTransport(text="<html>oops</html>"),
        )
        with pytest.raises(ProviderError) as exc_info:
            await provider.invoke("s", "u")
        assert exc_info.value.code == "E-3004"


class TestOllamaProvider:

    @pytest.mark.asyncio
    async def test_invoke(self):
        transport = RecordingTransport(body={"message": {"content": "{}"}})
        provider = OllamaProvider(endpoint="http://gpu-box:11434/", model="llama3", transport=transport)

        assert await provider.invoke("s", "u") == "{}"
        assert str(transport.requests[0].url) == "http://gpu-box:11434/api/chat"
        body = transport.last_json
        assert body["model"] == "llama3"
        assert body["stream"] is False
        assert body["format"] == "json"

    def test_defaults(self):
        provider = OllamaProvider()
        assert provider.endpoint == "http://localhost:11434"
        assert provider.model == "llama2"
        assert provider.timeout == 60.0


class TestCustomProvider:

    @pytest.mark.asyncio
    async def test_messages_body_and_probing(self):
        transport = RecordingTransport(body={"output": "reply"})
        provider = CustomProvider(
            endpoint="https://ai.example.com/run",
            headers={"X-Api-Key": "abc"},
            transport=transport,
        )
        assert await provider.invoke("s", "u") == "reply"
        assert transport.last_json["messages"][1] == {"role": "user", "content": "u"}
        assert transport.requests[0].headers["X-Api-Key"] == "abc"

    @pytest.mark.asyncio
    async def test_single_prompt_style(self):
        transport = RecordingTransport(body={"text": "t"})
        provider = CustomProvider(
            endpoint="https://ai.example.com/run", prompt_style="single", transport=transport
        )
        await provider.invoke("SYSTEM", "find CA")
        assert transport.last_json == {"prompt": "SYSTEM\n\nUser: find CA"}

    @pytest.mark.asyncio
    async def test_custom_transforms(self):
        transport = RecordingTransport(body={"data": {"answer": "42"}})
        provider = CustomProvider(
            endpoint="https://ai.example.com/run",
            transform_request=lambda system, user: {"q": user},
            transform_response=lambda payload: payload["data"]["answer"],
            transport=transport,
        )
        assert await provider.invoke("s", "what") == "42"
        assert transport.last_json == {"q": "what"}

    def test_endpoint_required(self):
        with pytest.raises(ProviderConfigError):
            CustomProvider()


class TestExtractText:

    @pytest.mark.parametrize(
        "payload,expected",
        [
            ({"content": "a"}, "a"),
            ({"text": "b"}, "b"),
            ({"response": "c"}, "c"),
            ({"choices": [{"text": "d"}]}, "d"),
            ({"choices": [{"message": {"content": "e"}}]}, "e"),
            ("plain", "plain"),
        ],
    )
    def test_probes_common_fields(self, payload, expected):
        assert extract_text(payload) == expected

    def test_falls_back_to_json(self):
        payload = {"result": {"filters": []}}
        assert json.loads(extract_text(payload)) == payload

    def test_single_prompt_body(self):
        assert single_prompt_body("a", "b") == {"prompt": "a\n\nUser: b"}


def _anthropic_client(**create_kwargs) -> MagicMock:
    client = MagicMock()
    client.messages.create = AsyncMock(**create_kwargs)
    return client


_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


class TestAnthropicProvider:

    @pytest.mark.asyncio
    async def test_structured_mode_returns_tool_input(self):
        tool_input = {"filters": [], "sorting": [{"id": "age", "desc": True}], "confidence": 0.8}
        client = _anthropic_client(
            return_value=SimpleNamespace(
                content=[SimpleNamespace(type="tool_use", name=TOOL_NAME, input=tool_input)]
            )
        )
        provider = AnthropicProvider(client=client)

        text = await provider.invoke("system text", "oldest first")

        assert json.loads(text) == tool_input
        kwargs = client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-3-haiku-20240307"
        assert kwargs["system"] == "system text"
        assert kwargs["messages"] == [{"role": "user", "content": "oldest first"}]
        assert kwargs["tool_choice"] == {"type": "tool", "name": TOOL_NAME}
        assert kwargs["tools"][0]["input_schema"]["required"] == ["filters", "sorting", "confidence"]

    @pytest.mark.asyncio
    async def test_text_mode_returns_first_text_block(self):
        client = _anthropic_client(
            return_value=SimpleNamespace(content=[SimpleNamespace(type="text", text='{"x": 1}')])
        )
        provider = AnthropicProvider(client=client, structured=False)

        assert await provider.invoke("s", "u") == '{"x": 1}'
        assert "tools" not in client.messages.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_empty_content(self):
        client = _anthropic_client(return_value=SimpleNamespace(content=[]))
        assert await AnthropicProvider(client=client).invoke("s", "u") == ""

    @pytest.mark.asyncio
    async def test_status_error(self):
        response = httpx.Response(529, request=_REQUEST)
        client = _anthropic_client(
            side_effect=anthropic.APIStatusError("Overloaded", response=response, body=None)
        )
        with pytest.raises(ProviderError) as exc_info:
            await AnthropicProvider(client=client).invoke("s", "u")
        assert exc_info.value.code == "E-3001"
        assert exc_info.value.status_code == 529
        assert "Overloaded" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_timeout(self):
        client = _anthropic_client(side_effect=anthropic.APITimeoutError(request=_REQUEST))
        with pytest.raises(ProviderError) as exc_info:
            await AnthropicProvider(client=client, timeout=12).invoke("s", "u")
        assert exc_info.value.code == "E-3002"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        client = _anthropic_client(side_effect=anthropic.APIConnectionError(request=_REQUEST))
        with pytest.raises(ProviderError) as exc_info:
            await AnthropicProvider(client=client).invoke("s", "u")
        assert exc_info.value.code == "E-3003"

    def test_requires_key_without_client(self):
        with pytest.raises(ProviderConfigError):
            AnthropicProvider()

    def test_builds_sdk_client(self):
        provider = AnthropicProvider(api_key="sk-ant-test")
        assert isinstance(provider._client, anthropic.AsyncAnthropic)
