"""Cancellation error type.

``CancelledError`` marks a run that ended because its token was cancelled
(explicit ``cancel``, a resubmission, or controller shutdown). It carries the
``cancelled`` code so the run state records it like any other run error.
"""

from __future__ import annotations

from typing import Optional

from ..errors_parts.error_code import ErrorCode
from ..errors_parts.provider_error import ProviderError


class CancelledError(ProviderError):
    """Raised when a run observes a cancellation request."""

    def __init__(self, message: str = "operation cancelled", *, provider: str = "arena", model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.CANCELLED, message=message, provider=provider, model=model)


__all__ = ["CancelledError"]
