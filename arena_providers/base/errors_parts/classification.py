"""
Error classification helpers mapping failures to normalized ErrorCode values.

Three inputs are classified here: HTTP statuses of non-2xx responses,
exceptions raised while talking to an upstream, and the error ``type``/
``status`` strings carried by in-band stream error events.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError

_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
    529: ErrorCode.UNAVAILABLE,
}

# Ordered: the first keyword found in the lowered text wins.
_KEYWORDS: Tuple[Tuple[str, ErrorCode], ...] = (
    ("timeout", ErrorCode.TIMEOUT),
    ("timed out", ErrorCode.TIMEOUT),
    ("rate_limit", ErrorCode.RATE_LIMIT),
    ("rate limit", ErrorCode.RATE_LIMIT),
    ("resource_exhausted", ErrorCode.RATE_LIMIT),
    ("overloaded", ErrorCode.UNAVAILABLE),
    ("unavailable", ErrorCode.UNAVAILABLE),
    ("api key", ErrorCode.AUTH),
    ("authentication", ErrorCode.AUTH),
    ("unauthenticated", ErrorCode.AUTH),
    ("unauthorized", ErrorCode.AUTH),
    ("permission", ErrorCode.AUTH),
    ("forbidden", ErrorCode.AUTH),
    ("not supported", ErrorCode.UNSUPPORTED),
    ("unsupported", ErrorCode.UNSUPPORTED),
    ("not_found", ErrorCode.NOT_FOUND),
    ("not found", ErrorCode.NOT_FOUND),
    ("invalid", ErrorCode.VALIDATION),
    ("internal", ErrorCode.SERVER_ERROR),
    ("server error", ErrorCode.SERVER_ERROR),
)


def _status_of(exc: Exception) -> Optional[int]:
    """Return an HTTP status carried by ``exc`` or its ``response``, if any."""
    for holder, attr in ((exc, "status_code"), (exc, "status"), (getattr(exc, "response", None), "status_code")):
        val = getattr(holder, attr, None) if holder is not None else None
        if isinstance(val, int) and 100 <= val < 600:
            return val
    return None


def _keyword_code(text: str) -> Optional[ErrorCode]:
    lowered = text.lower()
    for keyword, code in _KEYWORDS:
        if keyword in lowered:
            return code
    return None


def status_to_code(status: int) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode` (5xx fallback to server error)."""
    code = _HTTP_STATUS_MAP.get(status)
    if code is not None:
        return code
    return ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.UNKNOWN


def upstream_code(raw: Optional[str]) -> ErrorCode:
    """Map an in-band error identifier (``overloaded_error``, ``RESOURCE_EXHAUSTED``)."""
    if not raw:
        return ErrorCode.UNKNOWN
    try:
        return ErrorCode(raw)
    except ValueError:
        return _keyword_code(raw) or ErrorCode.UNKNOWN


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    ``ProviderError`` keeps its code; timeouts and httpx transport failures
    are mapped by type; anything else falls back to an attached HTTP status
    and then to keywords in the message.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return ErrorCode.UNAVAILABLE
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    status = _status_of(exc)
    if status is not None and status_to_code(status) is not ErrorCode.UNKNOWN:
        return status_to_code(status)
    return _keyword_code(str(exc)) or ErrorCode.UNKNOWN


__all__ = ["classify_exception", "status_to_code", "upstream_code"]
