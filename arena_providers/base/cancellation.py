"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose the run cancellation constructs via the canonical
``arena_providers.base.cancellation`` import path while the concrete
implementations live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` is threaded through every model run. The controller
  owns a root token; each run gets a child so ``aclose`` cascades.
- ``on_cancel`` callbacks let the run loop interrupt a pending network read
  instead of waiting for the next chunk to arrive.
- ``CancelledError`` is raised by operations that observe a cancellation request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
