"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. --config <path> CLI flag
2. ./tailgrid.yaml (working directory)
3. ~/.tailgrid/config.yaml (user home)

Environment variables override YAML: TAILGRID_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.

Example tailgrid.yaml:
    ai:
      provider: anthropic
      api_key: ${ANTHROPIC_API_KEY}
      confidence_threshold: 0.8
    grid:
      page_size: 25
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from tailgrid.ai.config import DEFAULT_CONFIDENCE_THRESHOLD
from tailgrid.engine.models import DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve ${VAR} references in a nested data structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class AIConfig(BaseModel):
    """AI provider settings. Unset values fall back to TAILGRID_AI_* env defaults."""

    provider: str | None = None
    model: str | None = None
    endpoint: str | None = None
    api_key: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    structured: bool = True
    confidence_threshold: float = Field(default=DEFAULT_CONFIDENCE_THRESHOLD, ge=0, le=1)
    context: str | None = None


class GridConfig(BaseModel):
    """Grid display settings for the CLI."""

    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1)
    log_level: Literal["debug", "info", "warning", "error"] = "warning"


class TailGridConfig(BaseModel):
    """Top-level configuration for the TailGrid CLI."""

    ai: AIConfig = AIConfig()
    grid: GridConfig = GridConfig()


def _find_config_file() -> Path | None:
    """Search for config file in standard locations."""
    candidates = [
        Path.cwd() / "tailgrid.yaml",
        Path.cwd() / "tailgrid.yml",
        Path.home() / ".tailgrid" / "config.yaml",
        Path.home() / ".tailgrid" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply TAILGRID_<SECTION>_<KEY> env var overrides to config data.

    For example, ``TAILGRID_GRID_PAGE_SIZE=25`` maps to section ``grid``,
    field ``page_size``, and ``TAILGRID_AI_CONFIDENCE_THRESHOLD`` to
    ``ai.confidence_threshold``. Variables naming fields a section does not
    have are still copied; unknown fields are ignored by validation.
    """
    prefix = "TAILGRID_"
    known_sections = sorted(TailGridConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        suffix = key[len(prefix):].lower()  # e.g. "grid_page_size"
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        if not isinstance(data.get(matched_section), dict):
            data[matched_section] = {}
        # Coerce to int, bool, or keep as string
        try:
            data[matched_section][matched_field] = int(value)
        except ValueError:
            if value.lower() in ("true", "false"):
                data[matched_section][matched_field] = value.lower() == "true"
            else:
                data[matched_section][matched_field] = value
    return data


def load_config(config_path: str | None = None) -> TailGridConfig:
    """Load TailGrid configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.tailgrid/).

    Returns:
        Parsed and validated TailGridConfig. Defaults plus env overrides
        when no file is found.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
    """
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    raw_data: dict[str, Any] = {}
    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return TailGridConfig(**data)


def find_config_path(config_path: str | None = None) -> Path | None:
    """Config file that load_config() would read, if any."""
    return Path(config_path) if config_path else _find_config_file()
