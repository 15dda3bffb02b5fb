"""
Callback type for run state notifications.

Listeners receive a detached :class:`ModelRunState` snapshot after every
mutation of any run. A listener that raises is logged and skipped; it never
affects the run that triggered it.
"""

from __future__ import annotations

from typing import Callable

from ..models_parts.run_state import ModelRunState

StateListener = Callable[[ModelRunState], None]

__all__ = ["StateListener"]
