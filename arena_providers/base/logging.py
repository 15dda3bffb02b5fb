"""Structured logging utilities for the aggregation engine.

Purpose
-------
Configure the shared ``arena`` logger once and hand out child loggers that
propagate to it. Every run and controller event is emitted as a single JSON
object so per-model timelines can be grepped or aggregated.

Notes
-----
- The level comes from ``ARENA_LOG_LEVEL`` (default ``INFO``).
- ``normalized_log_event`` guarantees the keys listed in
  ``REQUIRED_NORMALIZED_KEYS``; ``error_code`` is only present on failures.
- ``configure_logger(file_path=...)`` mirrors events into a rotating file.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Mapping, Optional

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "arena"
LOG_LEVEL_ENV = "ARENA_LOG_LEVEL"
_READY_ATTR = "_arena_logger_initialized"
_CONSOLE_HANDLER_ATTR = "_arena_console_handler"
_FILE_HANDLER_ATTR = "_arena_file_handler"
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 5

REQUIRED_NORMALIZED_KEYS = ("structured", "phase", "attempt", "emitted", "tokens")


def _parse_level(value: int | str | None, default: int = logging.INFO) -> int:
    """Resolve a level number or name (``warn`` is accepted); fall back to ``default``."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    name = value.strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else default


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_TEXT_FORMAT)


def _console_handler(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    return handler


def _is_console(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _CONSOLE_HANDLER_ATTR, False))


def _drop(logger: logging.Logger, handler: logging.Handler) -> None:
    logger.removeHandler(handler)
    with contextlib.suppress(Exception):
        handler.close()


def _refresh_console(logger: logging.Logger, json_mode: bool, level: int) -> None:
    """Re-level console handlers and replace any whose stream was closed.

    Test runners swap and close ``sys.stderr`` between tests, which would
    otherwise leave a handler writing into a dead stream.
    """
    for handler in list(logger.handlers):
        if not _is_console(handler):
            continue
        stream = getattr(handler, "stream", None)
        if stream is None or getattr(stream, "closed", False):
            _drop(logger, handler)
            logger.addHandler(_console_handler(json_mode, level))
        else:
            handler.setLevel(level)


def _base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Return the shared ``arena`` logger, initializing it on first use."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    wanted = _parse_level(os.getenv(LOG_LEVEL_ENV), default=level)
    if not getattr(logger, _READY_ATTR, False):
        logger.handlers[:] = [_console_handler(json_mode, wanted)]
        logger.propagate = False
        setattr(logger, _READY_ATTR, True)
    else:
        _refresh_console(logger, json_mode, wanted)
    logger.setLevel(wanted)
    return logger


def get_logger(name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO) -> logging.Logger:
    """Return the base logger or a propagating child (e.g. ``arena.run``)."""
    base = _base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base
    qualified = name if name.startswith(f"{BASE_LOGGER_NAME}.") else f"{BASE_LOGGER_NAME}.{name}"
    child = logging.getLogger(qualified)
    child.setLevel(logging.NOTSET)
    child.propagate = True
    return child


def _attach_file(logger: logging.Logger, file_path: str, json_mode: bool) -> None:
    target = os.path.abspath(os.path.expanduser(file_path))
    keep: Optional[logging.Handler] = None
    for handler in [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]:
        if keep is None and getattr(handler, "baseFilename", None) == target:
            keep = handler
        else:
            _drop(logger, handler)
    if keep is None:
        os.makedirs(os.path.dirname(target), exist_ok=True)
        keep = RotatingFileHandler(target, maxBytes=_FILE_MAX_BYTES, backupCount=_FILE_BACKUPS, encoding="utf-8")
        setattr(keep, _FILE_HANDLER_ATTR, True)
        logger.addHandler(keep)
    keep.setFormatter(_formatter(json_mode))
    keep.setLevel(logger.level)


def configure_logger(
    *,
    level: int | str | None = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``arena`` logger at runtime.

    Parameters
    ----------
    level: int | str | None
        New level as a number or a name such as ``"DEBUG"``. ``None`` keeps the
        current level.
    file_path: Optional[str]
        Mirror events into a rotating file at this path. ``None`` detaches a
        file handler previously attached here.
    json_mode: bool
        JSON formatter when true, plain text otherwise.

    Handlers not attached by this module are left untouched.
    """
    logger = _base_logger(json_mode=json_mode, level=logging.INFO)
    if level is not None:
        resolved = _parse_level(level, default=logger.level)
        logger.setLevel(resolved)
        for handler in logger.handlers:
            handler.setLevel(resolved)
    if file_path is not None:
        _attach_file(logger, file_path, json_mode)
        return logger
    for handler in [h for h in logger.handlers if getattr(h, _FILE_HANDLER_ATTR, False)]:
        _drop(logger, handler)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    keep_none: bool = False,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit one structured event as a JSON message.

    ``None`` values are dropped unless ``keep_none`` is true.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    payload |= fields if keep_none else {k: v for k, v in fields.items() if v is not None}
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def _token_fields(tokens: Any) -> Optional[Dict[str, Any]]:
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens)
    if isinstance(tokens, (list, tuple)):
        with contextlib.suppress(TypeError, ValueError):
            return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(  # noqa: PLR0913
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a run event carrying the normalized key set.

    ``phase`` is one of ``start``, ``stream``, ``finalize`` or ``controller``.
    Extra fields never overwrite the normalized values.
    """
    fields: Dict[str, Any] = {
        "structured": True,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _token_fields(tokens),
    }
    if error_code is not None:
        fields["error_code"] = error_code
    fields |= {k: v for k, v in extra_fields.items() if v is not None and k not in fields}
    log_event(logger, event, ctx, keep_none=True, level=level, **fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LOG_LEVEL_ENV",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
