"""Gemini stream interpreter (structured parts family).

Each chunk carries ``candidates[0].content.parts`` and, usually, a cumulative
``usageMetadata`` block. One chunk may therefore yield a ``TextDelta`` (the
rendered parts) followed by a ``UsageSnapshot``. ``interpret_event`` is a
generator so a malformed usage block discards only the usage, not the text
already yielded for the same chunk.

Usage mapping: input = ``promptTokenCount``; output = ``candidatesTokenCount``
plus ``thoughtsTokenCount``; reasoning = ``thoughtsTokenCount``. A candidate
with a ``finishReason`` marks the snapshot final.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

from ..base.streaming.deltas import Delta, Ignorable, StreamError, TextDelta, UsageSnapshot
from ..base.streaming.parts import render_parts
from ..base.streaming.usage import coerce_count, require_mapping


def _usage(meta: Any, is_final: bool) -> UsageSnapshot:
    data = require_mapping(meta, "usageMetadata")
    prompt = coerce_count(data.get("promptTokenCount"), "promptTokenCount")
    candidates = coerce_count(data.get("candidatesTokenCount"), "candidatesTokenCount")
    thoughts = coerce_count(data.get("thoughtsTokenCount"), "thoughtsTokenCount")
    output: Optional[int] = None
    if candidates is not None or thoughts is not None:
        output = (candidates or 0) + (thoughts or 0)
    return UsageSnapshot(
        input_tokens=prompt,
        output_tokens=output,
        is_final=is_final,
        reasoning_tokens=thoughts,
    )


def interpret_event(event: Any) -> Iterator[Delta]:
    """Yield the deltas carried by one generateContent stream chunk."""
    if not isinstance(event, Mapping):
        yield Ignorable("unexpected_shape")
        return
    err = event.get("error")
    if isinstance(err, Mapping):
        yield StreamError(message=str(err.get("message") or "upstream error"), code=err.get("status"))
        return
    candidates = event.get("candidates") or []
    candidate = candidates[0] if candidates else {}
    parts = (candidate.get("content") or {}).get("parts") or []
    emitted = False
    text = render_parts(parts)
    if text:
        emitted = True
        yield TextDelta(text)
    meta = event.get("usageMetadata")
    if meta is not None:
        emitted = True
        yield _usage(meta, candidate.get("finishReason") is not None)
    if emitted:
        return
    blocked = (event.get("promptFeedback") or {}).get("blockReason")
    if blocked:
        yield StreamError(message=f"prompt blocked: {blocked}", code="blocked")
    else:
        yield Ignorable("empty_chunk")


__all__ = ["interpret_event"]
