"""
Run-scoped error types layered on :class:`ProviderError`.

Each class fixes the default :class:`ErrorCode` for one failure category:

- ``ValidationError``: detected before any network call (budget conflicts,
  missing credentials, unknown models). Never retried automatically.
- ``TransportError``: connection failures, non-2xx responses, aborted streams,
  and in-band upstream error events. Fails the run.
- ``FrameDecodeError``: a single frame payload that is not valid JSON.
  Recovered locally by the interpreter dispatcher.
- ``UsageParseError``: a usage object that is present but malformed.
  Recovered locally; the last known-good usage is retained.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ValidationError(ProviderError):
    """Pre-network validation failure for a single run."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "arena",
        model: Optional[str] = None,
        code: ErrorCode = ErrorCode.VALIDATION,
    ) -> None:
        super().__init__(code=code, message=message, provider=provider, model=model, retryable=False)


class TransportError(ProviderError):
    """Network or upstream failure that ends a run in ``errored``."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        model: Optional[str] = None,
        code: ErrorCode = ErrorCode.TRANSIENT,
        status: Optional[int] = None,
        raw: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            provider=provider,
            model=model,
            retryable=code in (ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.UNAVAILABLE),
            raw=raw,
        )
        self.status = status


class FrameDecodeError(ProviderError):
    """A frame payload could not be decoded as structured data."""

    def __init__(self, message: str, *, provider: str = "stream", raw: Optional[Exception] = None) -> None:
        super().__init__(code=ErrorCode.DECODE, message=message, provider=provider, raw=raw)


class UsageParseError(FrameDecodeError):
    """A usage object was present but its counts were malformed."""


__all__ = ["ValidationError", "TransportError", "FrameDecodeError", "UsageParseError"]
