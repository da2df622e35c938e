"""Configuration for the AI query pipeline.

Provider defaults are read from the environment so scripts and the CLI can
share them without a config file.

Environment Variables:
    TAILGRID_AI_PROVIDER: Provider kind. Defaults to "openai".
        Options: openai, anthropic, ollama, custom
    TAILGRID_AI_MODEL: Model name. Defaults per provider:
          - openai: gpt-4o-mini
          - anthropic: claude-3-haiku-20240307
          - ollama: llama2
    TAILGRID_AI_ENDPOINT: Endpoint override (required for custom).
    TAILGRID_AI_TIMEOUT: Request timeout in seconds. Defaults to 30
        (60 for ollama).
    TAILGRID_AI_CONFIDENCE_THRESHOLD: Minimum confidence before a result is
        applied to a grid. Defaults to 0.7.
    OPENAI_API_KEY / ANTHROPIC_API_KEY: Provider credentials.
    OLLAMA_HOST: Ollama server URL. Defaults to http://localhost:11434.
"""

import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-haiku-20240307",
    "ollama": "llama2",
}

DEFAULT_TIMEOUTS = {
    "ollama": 60.0,
}
DEFAULT_TIMEOUT = 30.0

DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_OLLAMA_HOST = "http://localhost:11434"

DEFAULT_CONFIDENCE_THRESHOLD = 0.7

_API_KEY_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def _env(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r, using %s", name, raw, default)
        return default


def get_provider_kind() -> str:
    """Provider kind from TAILGRID_AI_PROVIDER, lower-cased."""
    return (_env("TAILGRID_AI_PROVIDER") or DEFAULT_PROVIDER).lower()


def get_model(kind: str) -> str | None:
    """Model for `kind`: TAILGRID_AI_MODEL, else the provider default.

    Example:
        >>> import os
        >>> os.environ["TAILGRID_AI_MODEL"] = "gpt-4o"
        >>> get_model("openai")
        'gpt-4o'
    """
    return _env("TAILGRID_AI_MODEL") or DEFAULT_MODELS.get(kind)


def get_endpoint(kind: str) -> str | None:
    """Endpoint override; OLLAMA_HOST is honored for ollama."""
    endpoint = _env("TAILGRID_AI_ENDPOINT")
    if endpoint is None and kind == "ollama":
        endpoint = _env("OLLAMA_HOST")
    return endpoint


def get_timeout(kind: str) -> float:
    """Request timeout in seconds for `kind`."""
    return _env_float("TAILGRID_AI_TIMEOUT", DEFAULT_TIMEOUTS.get(kind, DEFAULT_TIMEOUT))


def get_api_key(kind: str) -> str | None:
    """Credential for hosted providers; None for local/custom ones."""
    var = _API_KEY_VARS.get(kind)
    return _env(var) if var else None


def get_confidence_threshold() -> float:
    """Minimum confidence for auto-applying results, clamped into [0, 1]."""
    threshold = _env_float("TAILGRID_AI_CONFIDENCE_THRESHOLD", DEFAULT_CONFIDENCE_THRESHOLD)
    return max(0.0, min(1.0, threshold))
