"""Anthropic Messages stream interpreter.

Event mapping (one delta per event):

- ``message_start``        -> ``UsageSnapshot`` with input tokens only
- ``content_block_delta``  -> ``TextDelta`` for ``text_delta``; thinking,
                              signature and tool-input deltas are ignorable
- ``message_delta``        -> ``UsageSnapshot`` with cumulative output tokens,
                              final once a ``stop_reason`` is present
- ``message_stop``         -> ``Terminal``
- ``error``                -> ``StreamError``
- ``ping``, block start/stop and unknown events -> ``Ignorable``

Output usage on ``message_delta`` is cumulative: it replaces the previous
value rather than adding to it.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..base.streaming.deltas import Delta, Ignorable, StreamError, Terminal, TextDelta, UsageSnapshot
from ..base.streaming.usage import coerce_count, require_mapping

_IGNORED_SUBDELTAS = ("thinking_delta", "signature_delta", "input_json_delta", "citations_delta")


def _content_delta(event: Mapping[str, Any]) -> Delta:
    delta = event.get("delta") or {}
    kind = delta.get("type")
    if kind == "text_delta":
        return TextDelta(str(delta.get("text") or ""))
    if kind in _IGNORED_SUBDELTAS:
        return Ignorable(kind)
    return Ignorable("unrecognized_content_delta")


def _message_start(event: Mapping[str, Any]) -> Delta:
    usage = (event.get("message") or {}).get("usage")
    if usage is None:
        return Ignorable("message_start_without_usage")
    data = require_mapping(usage)
    return UsageSnapshot(input_tokens=coerce_count(data.get("input_tokens"), "input_tokens"))


def _message_delta(event: Mapping[str, Any]) -> Delta:
    usage = event.get("usage")
    stop_reason = (event.get("delta") or {}).get("stop_reason")
    if usage is None:
        return Ignorable("message_delta_without_usage")
    data = require_mapping(usage)
    return UsageSnapshot(
        # some gateways repeat input_tokens here; absent means unchanged
        input_tokens=coerce_count(data.get("input_tokens"), "input_tokens"),
        output_tokens=coerce_count(data.get("output_tokens"), "output_tokens"),
        is_final=stop_reason is not None,
    )


def _error(event: Mapping[str, Any]) -> Delta:
    err = event.get("error")
    if isinstance(err, Mapping):
        return StreamError(message=str(err.get("message") or "upstream error"), code=err.get("type"))
    return StreamError(message=str(err or "upstream error"))


_HANDLERS = {
    "message_start": _message_start,
    "content_block_delta": _content_delta,
    "message_delta": _message_delta,
    "message_stop": lambda _event: Terminal(),
    "error": _error,
}


def interpret_event(event: Any) -> Delta:
    """Interpret one Messages stream event."""
    if not isinstance(event, Mapping):
        return Ignorable("unexpected_shape")
    kind = event.get("type")
    handler = _HANDLERS.get(kind)
    if handler is None:
        return Ignorable(kind if isinstance(kind, str) else "unrecognized")
    return handler(event)


__all__ = ["interpret_event"]
