"""Byte stream framing.

``FrameReader`` turns an arbitrarily chunked byte stream into complete
newline-delimited frames. It knows nothing about SSE envelopes or JSON.

Invariants
----------
- Chunk-boundary invariance: any split of a byte stream yields the same frame
  sequence as delivering it in one chunk.
- The pending partial line is kept as raw bytes, so a multi-byte UTF-8
  sequence split across chunks decodes correctly.
- No frame is dropped or emitted twice; ``flush`` returns the residual once.
"""
from __future__ import annotations

from typing import List

_NEWLINE = b"\n"


class FrameReader:
    """Incremental splitter for newline-delimited frames."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._buffer = bytearray()
        self._encoding = encoding

    @property
    def pending(self) -> bytes:
        """Bytes held back waiting for a delimiter."""
        return bytes(self._buffer)

    def feed(self, chunk: bytes) -> List[str]:
        """Append ``chunk`` and return the frames it completed."""
        if not chunk:
            return []
        self._buffer.extend(chunk)
        frames: List[str] = []
        start = 0
        while True:
            idx = self._buffer.find(_NEWLINE, start)
            if idx < 0:
                break
            frame = self._decode(self._buffer[start:idx])
            if frame:
                frames.append(frame)
            start = idx + 1
        if start:
            del self._buffer[:start]
        return frames

    def flush(self) -> List[str]:
        """Return the non-empty residual as a final frame and clear the buffer."""
        if not self._buffer:
            return []
        frame = self._decode(self._buffer)
        self._buffer.clear()
        return [frame] if frame else []

    def _decode(self, raw: bytes | bytearray) -> str:
        line = bytes(raw)
        if line.endswith(b"\r"):
            line = line[:-1]
        # blank lines separate SSE records and are not frames
        if not line.strip():
            return ""
        return line.decode(self._encoding, errors="replace")


__all__ = ["FrameReader"]
