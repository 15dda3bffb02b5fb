"""Timeout configuration for streaming runs.

Centralizes the timeout values applied to every model run so no call site
hard-codes its own numbers.

TimeoutConfig
    Frozen dataclass with the normalized timeout values (seconds).

get_timeout_config()
    Returns a process-cached configuration, re-parsed only when the relevant
    environment variables change. Supported variables (all optional):
        ARENA_TIMEOUT_START_SECONDS   connect/handshake timeout
        ARENA_TIMEOUT_STREAM_SECONDS  idle timeout between two chunks
        ARENA_TIMEOUT_WRITE_SECONDS   request upload timeout

to_httpx_timeout()
    Builds the ``httpx.Timeout`` used by the shared async client. The connect
    timeout is the start timeout and the read timeout is the stream-idle
    timeout, so a hung upstream surfaces as ``httpx.ReadTimeout``.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        start_timeout_seconds: Time allowed to establish the connection.
        stream_timeout_seconds: Idle time allowed between two streamed chunks.
        write_timeout_seconds: Time allowed to send the request body.
    """

    start_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0
    write_timeout_seconds: float = 30.0


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None
_ENV_VARS = (
    "ARENA_TIMEOUT_START_SECONDS",
    "ARENA_TIMEOUT_STREAM_SECONDS",
    "ARENA_TIMEOUT_WRITE_SECONDS",
)


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the cached `TimeoutConfig`, refreshed when env overrides change."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(name, "") for name in _ENV_VARS)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        start_timeout_seconds=_parse_env_float("ARENA_TIMEOUT_START_SECONDS", 30.0),
        stream_timeout_seconds=_parse_env_float("ARENA_TIMEOUT_STREAM_SECONDS", 60.0),
        write_timeout_seconds=_parse_env_float("ARENA_TIMEOUT_WRITE_SECONDS", 30.0),
    )
    _ENV_GUARD = guard
    return _CACHED


def to_httpx_timeout(cfg: TimeoutConfig | None = None) -> httpx.Timeout:
    """Translate a `TimeoutConfig` into an ``httpx.Timeout``."""
    cfg = cfg or get_timeout_config()
    return httpx.Timeout(
        connect=cfg.start_timeout_seconds,
        read=cfg.stream_timeout_seconds,
        write=cfg.write_timeout_seconds,
        pool=cfg.start_timeout_seconds,
    )


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "to_httpx_timeout",
]
