"""Frame interpretation dispatcher.

``interpret_frame`` is the single place where per-frame failures are
contained. Whatever goes wrong while decoding one frame (invalid JSON, a
malformed usage object, an unexpected payload shape) becomes an
:class:`Ignorable` delta and a warning log line; it never escapes to the run
loop. Transport failures are handled elsewhere and do fail the run.

Family interpreters return either one delta or an iterator of deltas. An
iterator is consumed inside the guarded block, so deltas yielded before a
failure are kept.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Tuple

from ..errors_parts.run_errors import FrameDecodeError, UsageParseError
from ..factory import get_interpreter
from ..log_support import LogContext
from ..logging import get_logger, normalized_log_event
from ..models_parts.wire_family import WireFamily
from .deltas import Delta, Ignorable, Terminal
from .envelope import DONE_SENTINEL, decode_payload, split_envelope

_LOGGER = get_logger("arena.stream")

_SHAPE_ERRORS = (KeyError, IndexError, TypeError, AttributeError, ValueError)


def _collect(result: Any, into: List[Delta]) -> None:
    if result is None:
        return
    if isinstance(result, (tuple, list)) or hasattr(result, "__next__"):
        for delta in result:
            into.append(delta)
        return
    into.append(result)


def _log_failure(reason: str, exc: BaseException, frame: str, ctx: Optional[LogContext]) -> None:
    normalized_log_event(
        _LOGGER,
        "stream.frame.decode_error",
        ctx,
        phase="stream",
        error_code="decode",
        reason=reason,
        detail=str(exc),
        frame_preview=frame[:120],
        level=logging.WARNING,
    )


def interpret_frame(
    family: WireFamily | str,
    frame: str,
    *,
    ctx: Optional[LogContext] = None,
) -> Tuple[Delta, ...]:
    """Translate one raw frame into normalized deltas (never empty).

    Non-data lines and empty payloads are ignorable. The ``[DONE]`` sentinel
    becomes :class:`Terminal` without JSON parsing. Otherwise the payload is
    decoded and handed to the family interpreter from the registry.
    """
    payload = split_envelope(frame)
    if payload is None:
        return (Ignorable("non_data_line"),)
    if not payload:
        return (Ignorable("empty_payload"),)
    if payload == DONE_SENTINEL:
        return (Terminal(),)
    interpret = get_interpreter(family)
    deltas: List[Delta] = []
    try:
        _collect(interpret(decode_payload(payload)), deltas)
    except UsageParseError as exc:
        _log_failure("usage_parse_error", exc, frame, ctx)
        deltas.append(Ignorable("usage_parse_error"))
    except FrameDecodeError as exc:
        _log_failure("decode_error", exc, frame, ctx)
        deltas.append(Ignorable("decode_error"))
    except _SHAPE_ERRORS as exc:
        _log_failure("unexpected_shape", exc, frame, ctx)
        deltas.append(Ignorable("unexpected_shape"))
    return tuple(deltas) or (Ignorable("unrecognized"),)


__all__ = ["interpret_frame"]
