"""
Normalized run error codes (taxonomy).

Defines the `ErrorCode` enumeration used across wire-family interpreters, the
per-model run loop, and the aggregation controller. Values are lowercase
snake_case and are considered a stable public contract for logging and for
the ``error_code`` field exposed on run snapshots.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    MISSING_CREDENTIAL = "missing_credential"
    DECODE = "decode"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
