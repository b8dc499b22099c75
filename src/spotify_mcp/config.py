"""Server configuration read from environment variables.

Variables (all optional):
    SPOTIFY_MCP_TIMEOUT: osascript timeout in seconds (default 30)
    SPOTIFY_MCP_MAX_OUTPUT_BYTES: cap on captured stdout (default 1 MiB)
    SPOTIFY_MCP_OSASCRIPT: interpreter binary (default "osascript")
    SPOTIFY_MCP_LOG_LEVEL: log level name (default "WARNING")
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_OUTPUT_BYTES = 1024 * 1024
DEFAULT_OSASCRIPT = "osascript"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class ExecutorConfig:
    """Limits applied to every osascript invocation."""

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES
    osascript_path: str = DEFAULT_OSASCRIPT


@dataclass(frozen=True)
class ServerConfig:
    executor: ExecutorConfig = field(default_factory=ExecutorConfig)
    log_level: str = DEFAULT_LOG_LEVEL


def _read_positive_int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if parsed <= 0:
        return default
    return parsed


def _read_positive_float_env(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    # NaN fails this comparison too
    if not parsed > 0 or parsed == float("inf"):
        return default
    return parsed


def _read_log_level_env(name: str, default: str) -> str:
    value = os.environ.get(name, "").strip().upper()
    if value and isinstance(logging.getLevelName(value), int):
        return value
    return default


def get_config() -> ServerConfig:
    """Get configuration from environment variables."""
    osascript_path = os.environ.get("SPOTIFY_MCP_OSASCRIPT", "").strip() or DEFAULT_OSASCRIPT
    return ServerConfig(
        executor=ExecutorConfig(
            timeout_seconds=_read_positive_float_env("SPOTIFY_MCP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            max_output_bytes=_read_positive_int_env("SPOTIFY_MCP_MAX_OUTPUT_BYTES", DEFAULT_MAX_OUTPUT_BYTES),
            osascript_path=osascript_path,
        ),
        log_level=_read_log_level_env("SPOTIFY_MCP_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
