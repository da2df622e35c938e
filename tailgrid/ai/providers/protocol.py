"""Provider interface for AI query backends.

Backends share no base class. Anything with a `kind` and an async
`invoke(system, user) -> str` can be handed to AIQueryPipeline or
registered with the factory.
"""

from enum import Enum
from typing import Protocol, runtime_checkable


class ProviderKind(str, Enum):
    """Built-in provider kinds."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    OLLAMA = "ollama"
    CUSTOM = "custom"


@runtime_checkable
class ProviderAdapter(Protocol):
    """Protocol every provider backend satisfies.

    invoke() sends one system+user prompt pair and returns the reply text.
    Transport failures (timeout, connection, non-2xx) raise ProviderError.
    """

    kind: str

    async def invoke(self, system: str, user: str) -> str:
        """Send the prompt pair and return the provider's raw text reply."""
        ...
