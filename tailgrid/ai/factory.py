"""Provider factory.

Maps a provider-kind tag to a constructor. Built-in kinds are registered at
import time; register_provider() adds further backends without touching
this module.

Example:
    provider = create_provider("ollama", model="llama3")
    provider = create_provider(ProviderKind.OPENAI, api_key="sk-...")
"""

import logging
from typing import Any, Callable

from tailgrid.ai import config
from tailgrid.ai.providers import (
    AnthropicProvider,
    CustomProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderAdapter,
    ProviderKind,
)
from tailgrid.errors.domain import ProviderConfigError

logger = logging.getLogger(__name__)

ProviderFactory = Callable[..., ProviderAdapter]

_REGISTRY: dict[str, ProviderFactory] = {
    ProviderKind.OPENAI.value: OpenAIProvider,
    ProviderKind.ANTHROPIC.value: AnthropicProvider,
    ProviderKind.OLLAMA.value: OllamaProvider,
    ProviderKind.CUSTOM.value: CustomProvider,
}


def _key(kind: ProviderKind | str) -> str:
    return kind.value if isinstance(kind, ProviderKind) else str(kind).lower()


def register_provider(name: str, factory: ProviderFactory) -> None:
    """Register (or replace) the constructor for a provider kind."""
    _REGISTRY[_key(name)] = factory
    logger.debug("Registered AI provider %r", name)


def available_providers() -> list[str]:
    return sorted(_REGISTRY)


def create_provider(kind: ProviderKind | str, **options: Any) -> ProviderAdapter:
    """Construct the provider registered for `kind`.

    Args:
        kind: Provider kind tag.
        **options: Constructor keyword arguments for that provider.

    Returns:
        A ProviderAdapter.

    Raises:
        ProviderConfigError: Unknown kind (E-4002), or required options
            missing (E-4001).
    """
    factory = _REGISTRY.get(_key(kind))
    if factory is None:
        raise ProviderConfigError.unknown_kind(_key(kind))
    return factory(**options)


def provider_from_env(kind: str | None = None, **overrides: Any) -> ProviderAdapter:
    """Build a provider from TAILGRID_AI_* environment defaults.

    Args:
        kind: Provider kind; defaults to TAILGRID_AI_PROVIDER.
        **overrides: Options that win over environment values. None values
            are ignored.

    Returns:
        A ProviderAdapter.
    """
    kind = _key(kind or config.get_provider_kind())
    options: dict[str, Any] = {}

    if kind in (ProviderKind.OPENAI.value, ProviderKind.ANTHROPIC.value):
        options["api_key"] = config.get_api_key(kind)
    if kind in (ProviderKind.OPENAI.value, ProviderKind.ANTHROPIC.value, ProviderKind.OLLAMA.value):
        options["model"] = config.get_model(kind)
    if kind in {k.value for k in ProviderKind}:
        options["endpoint"] = config.get_endpoint(kind)
        options["timeout"] = config.get_timeout(kind)

    options.update({k: v for k, v in overrides.items() if v is not None})
    logger.info("Using AI provider %s (model=%s)", kind, options.get("model", "-"))
    return create_provider(kind, **options)
