"""Async HTTP client construction for model runs.

Purpose:
    Build the ``httpx.AsyncClient`` shared by every run of one controller.
    Timeouts derive exclusively from :func:`get_timeout_config`.

Lifecycle:
    An ``AsyncClient`` is bound to the event loop it first runs on, so clients
    are not pooled at module level. The controller creates one lazily (or
    accepts an injected one) and closes it in ``aclose`` when it owns it.
    Tests inject a client backed by ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import TimeoutConfig, to_httpx_timeout

DEFAULT_LIMITS = httpx.Limits(max_connections=32, max_keepalive_connections=8)


def build_async_client(
    *,
    timeout_config: Optional[TimeoutConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured for SSE streaming.

    Parameters:
        timeout_config: Overrides the process timeout configuration.
        transport: Optional custom transport (e.g. ``httpx.MockTransport``).
    """
    kwargs = {
        "timeout": to_httpx_timeout(timeout_config),
        "limits": DEFAULT_LIMITS,
        "headers": {"Accept": "text/event-stream"},
    }
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


__all__ = ["build_async_client", "DEFAULT_LIMITS"]
