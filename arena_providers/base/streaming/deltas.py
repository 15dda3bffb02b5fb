"""Normalized stream deltas.

Every wire family is decoded into the same small closed set of frozen
dataclasses. The run loop only ever sees these types, never raw payloads.

Variants
--------
TextDelta       a fragment of visible output text
UsageSnapshot   token counts as reported so far (cumulative semantics)
Terminal        upstream signalled end of stream
Ignorable       recognized or unrecognized frame with nothing to surface
StreamError     upstream reported an in-band error; fails the run
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class TextDelta:
    text: str


@dataclass(frozen=True)
class UsageSnapshot:
    """Token usage carried by one frame.

    ``None`` means "not reported by this frame", not zero. ``reasoning_tokens``
    is informational and already included in ``output_tokens``.
    """

    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    is_final: bool = False
    reasoning_tokens: Optional[int] = None


@dataclass(frozen=True)
class Terminal:
    pass


@dataclass(frozen=True)
class Ignorable:
    reason: str = "unrecognized"


@dataclass(frozen=True)
class StreamError:
    message: str
    code: Optional[str] = None


Delta = Union[TextDelta, UsageSnapshot, Terminal, Ignorable, StreamError]


__all__ = [
    "TextDelta",
    "UsageSnapshot",
    "Terminal",
    "Ignorable",
    "StreamError",
    "Delta",
]
