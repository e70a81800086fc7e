"""Shared logging helpers for the Notion resource."""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "NOTION_RESOURCE_LOG_LEVEL"


def resolve_log_level(default: int = logging.INFO) -> int:
    """Return the level named by ``NOTION_RESOURCE_LOG_LEVEL`` or ``default``."""

    name = os.getenv(LOG_LEVEL_ENV_VAR)
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: we default
    to INFO level and a terse format. Output always goes to stderr because stdout
    carries the orchestrator's JSON payload. Pass ``force=True`` to reconfigure
    during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level if level is not None else resolve_log_level(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=force,
    )
