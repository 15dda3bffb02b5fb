"""Rendering and logging helpers shared by the arena CLI.

Functions
---------
- ``parse_verbosity(value)``: map user strings and synonyms to a canonical
  logging level name.
- ``suppress_console_logs()``: context manager that detaches the console
  handler of the shared ``arena`` logger so structured run logs do not
  interleave with live output. File handlers stay attached.
- ``format_state_line(state)`` / ``format_summary(states)``: terminal
  rendering of model run snapshots.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterator, List, Mapping, Optional, Tuple

from ...base.logging import BASE_LOGGER_NAME
from ...base.models import ModelRunState
from ...config.defaults import CLI_PREVIEW_CHARS

_CONSOLE_HANDLER_ATTR = "_arena_console_handler"

_VERBOSITY = {
    "debug": "DEBUG",
    "verbose": "DEBUG",
    "info": "INFO",
    "warning": "WARNING",
    "warn": "WARNING",
    "error": "ERROR",
    "quiet": "ERROR",
    "critical": "CRITICAL",
    "silent": "CRITICAL",
}


def parse_verbosity(value: str) -> Optional[str]:
    """Return the canonical level name for ``value`` or ``None`` if invalid."""
    return _VERBOSITY.get(value.strip().lower())


@contextlib.contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Temporarily detach console handlers from the ``arena`` logger."""
    base = logging.getLogger(BASE_LOGGER_NAME)
    detached: List[Tuple[logging.Handler, int]] = []
    for handler in list(base.handlers):
        if not getattr(handler, _CONSOLE_HANDLER_ATTR, False):
            continue
        handler.flush()
        detached.append((handler, handler.level))
        base.removeHandler(handler)
    try:
        yield
    finally:
        for handler, level in detached:
            handler.setLevel(level)
            base.addHandler(handler)


def _tokens(state: ModelRunState) -> str:
    parts = [
        f"in={state.input_tokens if state.input_tokens is not None else '-'}",
        f"out={state.output_tokens if state.output_tokens is not None else '-'}",
    ]
    if state.reasoning_tokens:
        parts.append(f"reasoning={state.reasoning_tokens}")
    return " ".join(parts)


def format_state_line(state: ModelRunState) -> str:
    """One-line status used for ``--live`` transitions."""
    line = f"[{state.model_id}] {state.status.value} {_tokens(state)} {state.elapsed_seconds:.2f}s"
    if state.formatted_cost:
        line += f" {state.formatted_cost}"
    if state.error_message:
        line += f" error={state.error_message}"
    return line


def format_summary(states: Mapping[str, ModelRunState], *, preview_chars: int = CLI_PREVIEW_CHARS) -> str:
    """Multi-line per-model summary printed after ``compare --execute``."""
    blocks: List[str] = []
    for state in states.values():
        header = format_state_line(state)
        if state.time_to_first_token_ms is not None:
            header += f" ttft={state.time_to_first_token_ms:.0f}ms"
        body = state.accumulated_text
        if len(body) > preview_chars:
            body = body[:preview_chars] + "..."
        blocks.append(f"{header}\n{body}" if body else header)
    return "\n\n".join(blocks)


__all__ = ["parse_verbosity", "suppress_console_logs", "format_state_line", "format_summary"]
