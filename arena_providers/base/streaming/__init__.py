"""Streaming package public surface.

Framing (``FrameReader``), envelope handling, normalized deltas, structured
part rendering and the per-frame interpretation dispatcher.
"""

from .deltas import Delta, Ignorable, StreamError, Terminal, TextDelta, UsageSnapshot
from .envelope import DONE_SENTINEL, decode_payload, split_envelope
from .frames import FrameReader
from .interpreter import interpret_frame
from .parts import render_part, render_parts

__all__ = [
    "Delta",
    "TextDelta",
    "UsageSnapshot",
    "Terminal",
    "Ignorable",
    "StreamError",
    "FrameReader",
    "DONE_SENTINEL",
    "split_envelope",
    "decode_payload",
    "interpret_frame",
    "render_part",
    "render_parts",
]
