"""Usage count coercion shared by the wire-family interpreters.

Upstream usage objects are trusted only after coercion: a count that is
present but not a non-negative integer raises :class:`UsageParseError`, which
the interpreter dispatcher turns into an ignorable frame so the previously
observed usage is kept.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..errors_parts.run_errors import UsageParseError
from .deltas import UsageSnapshot


def coerce_count(value: Any, field: str) -> Optional[int]:
    """Coerce one token count; ``None`` passes through."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise UsageParseError(f"usage field {field!r} is boolean")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise UsageParseError(f"usage field {field!r} is not an integer: {value!r}")
    if value < 0:
        raise UsageParseError(f"usage field {field!r} is negative: {value}")
    return value


def require_mapping(value: Any, what: str = "usage") -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise UsageParseError(f"{what} object is not a mapping: {type(value).__name__}")
    return value


def snapshot_from(
    usage: Any,
    *,
    input_key: str,
    output_key: str,
    is_final: bool,
    reasoning_path: tuple[str, str] | None = None,
) -> UsageSnapshot:
    """Build a :class:`UsageSnapshot` from a provider usage mapping."""
    data = require_mapping(usage)
    reasoning: Optional[int] = None
    if reasoning_path is not None:
        details = data.get(reasoning_path[0])
        if details is not None:
            reasoning = coerce_count(
                require_mapping(details, reasoning_path[0]).get(reasoning_path[1]),
                ".".join(reasoning_path),
            )
    return UsageSnapshot(
        input_tokens=coerce_count(data.get(input_key), input_key),
        output_tokens=coerce_count(data.get(output_key), output_key),
        is_final=is_final,
        reasoning_tokens=reasoning,
    )


__all__ = ["coerce_count", "require_mapping", "snapshot_from"]
