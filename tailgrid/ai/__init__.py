"""Natural-language query translation for the grid engine.

This package provides:
- Column schema projection and prompt construction
- Provider backends (OpenAI, Anthropic, Ollama, custom HTTP) and a factory
- Response parsing and validation into AIQueryResult
- AIQueryPipeline, which ties them together and applies results to a grid
"""

from tailgrid.ai.factory import (
    available_providers,
    create_provider,
    provider_from_env,
    register_provider,
)
from tailgrid.ai.models import AIOutput, AIQueryResult, QueryHistoryEntry, QueryStatus
from tailgrid.ai.pipeline import AIQueryPipeline
from tailgrid.ai.prompt_builder import (
    build_prompt_context,
    build_system_prompt,
    build_user_prompt,
)
from tailgrid.ai.providers import (
    AnthropicProvider,
    CustomProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderAdapter,
    ProviderKind,
)
from tailgrid.ai.response_parser import parse_ai_response
from tailgrid.ai.schema import ColumnSchema, columns_to_schema

__all__ = [
    # Pipeline
    "AIQueryPipeline",
    # Models
    "AIOutput",
    "AIQueryResult",
    "QueryHistoryEntry",
    "QueryStatus",
    # Schema and prompts
    "ColumnSchema",
    "columns_to_schema",
    "build_system_prompt",
    "build_user_prompt",
    "build_prompt_context",
    # Parsing
    "parse_ai_response",
    # Providers
    "ProviderAdapter",
    "ProviderKind",
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
    "CustomProvider",
    "create_provider",
    "register_provider",
    "available_providers",
    "provider_from_env",
]
