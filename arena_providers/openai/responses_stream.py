"""OpenAI Responses API stream interpreter.

Maps one decoded Responses event to exactly one normalized delta:

- ``response.output_text.delta``  -> ``TextDelta``
- ``response.completed`` / ``response.incomplete`` -> final ``UsageSnapshot``
- ``error`` / ``response.failed`` -> ``StreamError``
- everything else (created, in_progress, reasoning summary deltas,
  output item bookkeeping) -> ``Ignorable``

Output tokens reported on completion already include hidden reasoning tokens
and are the authoritative output count; the reasoning share is exposed
separately as ``reasoning_tokens``.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..base.streaming.deltas import Delta, Ignorable, StreamError, TextDelta
from ..base.streaming.usage import snapshot_from

_IGNORED_PREFIXES = (
    "response.reasoning_summary",
    "response.reasoning",
    "response.output_item",
    "response.content_part",
    "response.web_search_call",
)


def _error_message(event: Mapping[str, Any]) -> tuple[str, Any]:
    err = event.get("error")
    if event.get("type") == "response.failed":
        err = (event.get("response") or {}).get("error") or err
    if isinstance(err, Mapping):
        return str(err.get("message") or "upstream error"), err.get("code")
    if err:
        return str(err), None
    return str(event.get("message") or "upstream error"), event.get("code")


def interpret_event(event: Any) -> Delta:
    """Interpret one Responses stream event."""
    if not isinstance(event, Mapping):
        return Ignorable("unexpected_shape")
    kind = event.get("type")
    if kind == "response.output_text.delta":
        return TextDelta(str(event.get("delta") or ""))
    if kind in ("response.completed", "response.incomplete"):
        usage = (event.get("response") or {}).get("usage")
        if usage is None:
            return Ignorable("completed_without_usage")
        return snapshot_from(
            usage,
            input_key="input_tokens",
            output_key="output_tokens",
            is_final=True,
            reasoning_path=("output_tokens_details", "reasoning_tokens"),
        )
    if kind in ("error", "response.failed"):
        message, code = _error_message(event)
        return StreamError(message=message, code=str(code) if code else None)
    if isinstance(kind, str) and kind.startswith(_IGNORED_PREFIXES):
        return Ignorable(kind)
    return Ignorable("unrecognized")


__all__ = ["interpret_event"]
