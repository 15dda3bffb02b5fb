"""Streaming interpreter for the chat-completions wire family.

Purpose:
- Translate one decoded chat-completions chunk into a normalized delta.

Notes:
- Text lives at ``choices[0].delta.content``.
- The include-usage frame has no text and carries a non-cumulative ``usage``
  object; it is taken verbatim as the final usage snapshot.
- ``delta.reasoning`` (reasoning traces some routers forward) is ignorable.
- A top-level ``error`` object is an in-band upstream failure.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..base.streaming.deltas import Delta, Ignorable, StreamError, TextDelta
from ..base.streaming.usage import snapshot_from


def _first_delta(event: Mapping[str, Any]) -> Mapping[str, Any]:
    choices = event.get("choices") or []
    if not choices:
        return {}
    return choices[0].get("delta") or {}


def interpret_event(event: Any) -> Delta:
    """Interpret one chat-completions chunk."""
    if not isinstance(event, Mapping):
        return Ignorable("unexpected_shape")
    err = event.get("error")
    if err:
        if isinstance(err, Mapping):
            code = err.get("code")
            return StreamError(message=str(err.get("message") or "upstream error"), code=str(code) if code else None)
        return StreamError(message=str(err))
    delta = _first_delta(event)
    content = delta.get("content")
    if content:
        return TextDelta(str(content))
    usage = event.get("usage")
    if usage is not None:
        return snapshot_from(
            usage,
            input_key="prompt_tokens",
            output_key="completion_tokens",
            is_final=True,
            reasoning_path=("completion_tokens_details", "reasoning_tokens"),
        )
    if delta.get("reasoning"):
        return Ignorable("reasoning")
    return Ignorable("empty_delta")


__all__ = ["interpret_event"]
