"""SSE envelope handling and payload decoding.

``split_envelope`` peels the ``data:`` prefix off one frame. Control lines
(``event:``, ``id:``, ``retry:``), comments (``:``) and anything else that is
not a data line yield ``None``.
"""
from __future__ import annotations

import json
from typing import Any, Optional

from ..errors_parts.run_errors import FrameDecodeError

DONE_SENTINEL = "[DONE]"
_DATA_PREFIX = "data:"


def split_envelope(frame: str) -> Optional[str]:
    """Return the payload of a ``data:`` frame, or ``None`` for other lines."""
    if not frame.startswith(_DATA_PREFIX):
        return None
    payload = frame[len(_DATA_PREFIX):]
    # the SSE grammar strips exactly one leading space
    if payload.startswith(" "):
        payload = payload[1:]
    return payload.strip()


def decode_payload(payload: str) -> Any:
    """Parse a JSON payload, raising :class:`FrameDecodeError` on failure."""
    try:
        return json.loads(payload)
    except (json.JSONDecodeError, ValueError) as exc:
        raise FrameDecodeError(f"invalid JSON payload: {exc}", raw=exc) from exc


__all__ = ["DONE_SENTINEL", "split_envelope", "decode_payload"]
