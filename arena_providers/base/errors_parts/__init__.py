"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `arena_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .run_errors import FrameDecodeError, TransportError, UsageParseError, ValidationError
from .classification import classify_exception, status_to_code, upstream_code

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "TransportError",
    "FrameDecodeError",
    "UsageParseError",
    "classify_exception",
    "status_to_code",
    "upstream_code",
]
