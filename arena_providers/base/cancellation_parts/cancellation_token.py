"""Cooperative cancellation token for model runs.

The controller owns one root token and hands each run a child. Cancelling the
root (``aclose``) reaches every run; cancelling a child reaches only its run.
A token flips once: later ``cancel`` calls keep the first reason.

Tokens are used from the event loop thread only, so no locking is done.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from .cancelled_error import CancelledError

CancelCallback = Callable[[Optional[str]], None]


class CancellationToken:
    """One-shot cancellation flag with callbacks and child propagation."""

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._callbacks: List[CancelCallback] = []
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Flip the token, run pending callbacks, then cancel children."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(reason)
        for child in list(self._children):
            child.cancel(reason)

    def on_cancel(self, callback: CancelCallback) -> Callable[[], None]:
        """Register ``callback(reason)`` and return its remover.

        On an already cancelled token the callback runs right away.
        """
        if self._cancelled:
            callback(self._reason)
        else:
            self._callbacks.append(callback)

        def _remove() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return _remove

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Attach ``token`` below this one; it is cancelled at once if we already are."""
        self._children.append(token)
        if self._cancelled:
            token.cancel(self._reason)
        return token

    def unlink_child(self, token: "CancellationToken") -> None:
        """Detach a finished run's token so the root does not accumulate them."""
        if token in self._children:
            self._children.remove(token)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r}, children={len(self._children)})"


__all__ = ["CancellationToken"]
