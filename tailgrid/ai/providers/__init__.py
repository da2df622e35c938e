"""AI provider backends.

Each backend satisfies ProviderAdapter: a `kind` tag and an async
`invoke(system, user) -> str` that raises ProviderError on transport
failures.
"""

from tailgrid.ai.providers.anthropic import AnthropicProvider
from tailgrid.ai.providers.custom import CustomProvider, extract_text
from tailgrid.ai.providers.ollama import OllamaProvider
from tailgrid.ai.providers.openai import OpenAIProvider
from tailgrid.ai.providers.protocol import ProviderAdapter, ProviderKind

__all__ = [
    "ProviderAdapter",
    "ProviderKind",
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
    "CustomProvider",
    "extract_text",
]
