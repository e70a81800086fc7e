"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .notion import (
    NOTION_API_VERSION,
    NOTION_BASE_URL,
    NOTION_TOKEN_ENV_VAR,
    NotionConfig,
    build_resilience_config,
    get_notion_config,
)

__all__ = [
    "NOTION_API_VERSION",
    "NOTION_BASE_URL",
    "NOTION_TOKEN_ENV_VAR",
    "ConfigurationError",
    "MissingConfigurationError",
    "NotionConfig",
    "RateLimit",
    "ResilienceConfig",
    "build_resilience_config",
    "get_notion_config",
    "optional_env_var",
]
