"""Notion API configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import optional_env_var
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

NOTION_BASE_URL: Final[str] = "https://api.notion.com/v1/"
NOTION_API_VERSION: Final[str] = "2022-06-28"
NOTION_TIMEOUT_SECONDS: Final[float] = 30.0
NOTION_TOKEN_ENV_VAR: Final[str] = "NOTION_API_TOKEN"

# Notion documents an average of three requests per second per integration.
NOTION_RATE_LIMIT: Final[RateLimit] = RateLimit(max_calls=3, per_seconds=1.0)


@dataclass(frozen=True, slots=True)
class NotionConfig:
    """Holds the credentials and target database for one invocation."""

    api_token: str
    database: str
    resilience: ResilienceConfig

    def __repr__(self) -> str:
        return f"NotionConfig(api_token='***', database={self.database!r})"


def build_resilience_config(
    *,
    api_token: str,
    notion_version: str = NOTION_API_VERSION,
    base_url: str = NOTION_BASE_URL,
    timeout_seconds: float = NOTION_TIMEOUT_SECONDS,
) -> ResilienceConfig:
    return ResilienceConfig(
        name="notion",
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        ratelimit=NOTION_RATE_LIMIT,
        default_headers={
            "Authorization": f"Bearer {api_token}",
            "Notion-Version": notion_version,
            "Content-Type": "application/json",
        },
    )


def get_notion_config(
    *,
    database: str,
    api_token: str | None = None,
    notion_version: str | None = None,
    base_url: str | None = None,
    timeout_seconds: float | None = None,
) -> NotionConfig:
    """Build the Notion configuration, falling back to ``NOTION_API_TOKEN`` for the token."""

    token = api_token.strip() if api_token else optional_env_var(NOTION_TOKEN_ENV_VAR)
    if not token:
        raise MissingConfigurationError(
            f"Missing configuration for: api_token (or {NOTION_TOKEN_ENV_VAR})"
        )
    if timeout_seconds is not None and timeout_seconds <= 0:
        raise ConfigurationError("timeout_seconds must be positive")

    return NotionConfig(
        api_token=token,
        database=database,
        resilience=build_resilience_config(
            api_token=token,
            notion_version=notion_version or NOTION_API_VERSION,
            base_url=base_url or NOTION_BASE_URL,
            timeout_seconds=timeout_seconds or NOTION_TIMEOUT_SECONDS,
        ),
    )
