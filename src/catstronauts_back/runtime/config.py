"""
Centralized configuration for the Catstronauts BFF.

Single source of truth for the upstream URL, HTTP timeout, GraphiQL toggle,
logging and port, read from environment variables.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import cache

DEFAULT_TRACK_API_URL = "https://odyssey-lift-off-rest-api.herokuapp.com/"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class BFFConfig:
    """BFF configuration from environment variables.

    Attributes:
        track_api_url: Base URL of the upstream Track REST API
        http_timeout: Upstream request timeout in seconds
        enable_graphiql: Serve the GraphiQL IDE on the GraphQL endpoint
        log_level: Minimum log level name (DEBUG, INFO, ...)
        log_dir: Directory for JSONL log files (console only if None)
        port: Port the server binds to
    """

    track_api_url: str = DEFAULT_TRACK_API_URL
    http_timeout: float = 30.0
    enable_graphiql: bool = True
    log_level: str = "INFO"
    log_dir: str | None = None
    port: int = 4000

    @property
    def log_level_value(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if not raw:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def load_config() -> BFFConfig:
    """Load configuration from environment variables.

    Environment variables:
        - CATSTRONAUTS_TRACK_API_URL → track_api_url
        - CATSTRONAUTS_HTTP_TIMEOUT → http_timeout
        - CATSTRONAUTS_GRAPHIQL → enable_graphiql
        - CATSTRONAUTS_LOG_LEVEL → log_level
        - CATSTRONAUTS_LOG_DIR → log_dir
        - PORT → port

    Raises:
        ValueError: If a numeric or boolean variable cannot be parsed
    """
    return BFFConfig(
        track_api_url=os.environ.get("CATSTRONAUTS_TRACK_API_URL") or DEFAULT_TRACK_API_URL,
        http_timeout=_env_float("CATSTRONAUTS_HTTP_TIMEOUT", 30.0),
        enable_graphiql=_env_bool("CATSTRONAUTS_GRAPHIQL", True),
        log_level=os.environ.get("CATSTRONAUTS_LOG_LEVEL") or "INFO",
        log_dir=os.environ.get("CATSTRONAUTS_LOG_DIR") or None,
        port=_env_int("PORT", 4000),
    )


@cache
def get_config() -> BFFConfig:
    """Process-wide configuration, loaded once."""
    return load_config()
