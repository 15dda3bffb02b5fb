"""Unified run error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``arena_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.run_errors import FrameDecodeError, TransportError, UsageParseError, ValidationError
from .errors_parts.classification import classify_exception, status_to_code, upstream_code

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
