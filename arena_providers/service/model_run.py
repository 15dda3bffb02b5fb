"""Per-model run loop.

Purpose
-------
Drive one model from ``running`` to a terminal state: validate the run
configuration, resolve the credential, build the request, POST it with httpx
streaming, and fold each decoded delta into the model's
:class:`ModelRunState`.

Failure semantics
-----------------
- Validation and missing credentials end the run before any network call.
  Any other failure while preparing is recorded with its own message.
- Non-2xx responses, transport exceptions and in-band upstream errors end the
  run as ``errored`` with a classified ``error_code``.
- Per-frame decode failures never reach this module; ``interpret_frame``
  turns them into ignorable deltas.
- Cancellation (token or task) ends the run with code ``cancelled``. The
  asyncio ``CancelledError`` is re-raised after the state is recorded.

Only this run mutates its state object. Every mutation is followed by a
``notify(state)`` call so the controller can fan out snapshots.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Callable, Iterable, Mapping, Optional

import httpx
import pydantic

from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import (
    ErrorCode,
    ProviderError,
    TransportError,
    ValidationError,
    classify_exception,
    status_to_code,
    upstream_code,
)
from ..base.interfaces import CredentialStore
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import ModelRunState, ProviderProfile, RunConfig
from ..base.request_build import PreparedRequest, build_request
from ..base.streaming import (
    FrameReader,
    StreamError,
    Terminal,
    TextDelta,
    UsageSnapshot,
    interpret_frame,
)

_LOGGER = get_logger("arena.run")

Notify = Callable[[ModelRunState], None]


def _error_message(raw: bytes, status: int, reason: str) -> str:
    """Extract a human-readable message from an error response body."""
    fallback = f"Error {status}: {reason}"
    try:
        data: Any = json.loads(raw.decode("utf-8", errors="replace"))
    except ValueError:
        return fallback
    if isinstance(data, list) and data:
        data = data[0]
    if not isinstance(data, dict):
        return fallback
    err = data.get("error")
    if isinstance(err, dict) and err.get("message"):
        return str(err["message"])
    if isinstance(err, str) and err.strip():
        return err
    return fallback


class ModelRun:
    """One streaming request for one model, bound to its state entry."""

    def __init__(
        self,
        model_id: str,
        profile: Optional[ProviderProfile],
        state: ModelRunState,
        *,
        prompt: str,
        config: Optional[RunConfig],
        client: httpx.AsyncClient,
        credentials: CredentialStore,
        endpoints: Mapping[str, str],
        token: CancellationToken,
        notify: Optional[Notify] = None,
        system_prompt: Optional[str] = None,
        run_id: Optional[str] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.model_id = model_id
        self.profile = profile
        self.state = state
        self.prompt = prompt
        self.config = config
        self.system_prompt = system_prompt
        self.run_id = run_id
        self._client = client
        self._credentials = credentials
        self._endpoints = endpoints
        self._token = token
        self._notify = notify
        self._clock = clock
        self._started: Optional[float] = None
        self._ctx = LogContext(
            provider=profile.provider if profile else None,
            model=model_id,
            wire_family=profile.wire_family.value if profile else None,
            run_id=run_id,
        )

    @property
    def _provider(self) -> str:
        return self.profile.provider if self.profile else "arena"

    # ------------------------------------------------------------------ state
    def begin(self) -> None:
        """Flip the state to ``running`` and start the elapsed clock."""
        self._started = self._clock()
        self.state.mark_running(self.run_id or "")
        self._emit()

    def _touch(self) -> None:
        if self._started is not None:
            self.state.elapsed_seconds = max(0.0, self._clock() - self._started)

    def _emit(self) -> None:
        self._touch()
        if self._notify is not None:
            self._notify(self.state)

    def _tokens(self) -> dict:
        return {
            "input": self.state.input_tokens,
            "output": self.state.output_tokens,
            "reasoning": self.state.reasoning_tokens,
        }

    # ------------------------------------------------------------ preparation
    def _prepare(self) -> PreparedRequest:
        """Validate, resolve the credential and build the request (no I/O)."""
        profile = self.profile
        if profile is None:
            raise ValidationError(f"Unknown model '{self.model_id}'", model=self.model_id)
        config = self.config or RunConfig.defaults_for(profile)
        config.validate_for(profile)
        api_key = self._credentials.get(profile.wire_family.value)
        if not api_key:
            raise ValidationError(
                f"Missing API Key for {profile.name}",
                provider=profile.provider,
                model=profile.id,
                code=ErrorCode.MISSING_CREDENTIAL,
            )
        return build_request(
            profile,
            self.prompt,
            config,
            api_key=api_key,
            endpoints=self._endpoints,
            system_prompt=self.system_prompt,
        )

    # --------------------------------------------------------------- transfer
    async def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        raw = await response.aread()
        status = response.status_code
        raise TransportError(
            _error_message(raw, status, response.reason_phrase),
            provider=self._provider,
            model=self.model_id,
            code=status_to_code(status),
            status=status,
        )

    def _apply(self, frames: Iterable[str]) -> bool:
        """Fold frames into the state; return ``True`` once a terminal is seen."""
        assert self.profile is not None  # nosec B101 - checked in _prepare
        family = self.profile.wire_family
        for frame in frames:
            self.state.frames_received += 1
            for delta in interpret_frame(family, frame, ctx=self._ctx):
                if isinstance(delta, TextDelta):
                    if not delta.text:
                        continue
                    if self.state.time_to_first_token_ms is None and self._started is not None:
                        self.state.time_to_first_token_ms = (self._clock() - self._started) * 1000.0
                    self.state.append_text(delta.text)
                elif isinstance(delta, UsageSnapshot):
                    self.state.apply_usage(
                        input_tokens=delta.input_tokens,
                        output_tokens=delta.output_tokens,
                        reasoning_tokens=delta.reasoning_tokens,
                        pricing=self.profile.pricing,
                    )
                elif isinstance(delta, StreamError):
                    raise TransportError(
                        delta.message,
                        provider=self._provider,
                        model=self.model_id,
                        code=upstream_code(delta.code),
                    )
                elif isinstance(delta, Terminal):
                    self._emit()
                    return True
            self._emit()
        return False

    async def _stream(self, request: PreparedRequest) -> None:
        async with self._client.stream(
            "POST", request.url, headers=request.headers, json=request.body
        ) as response:
            await self._raise_for_status(response)
            reader = FrameReader()
            async for chunk in response.aiter_bytes():
                self._token.raise_if_cancelled()
                if self._apply(reader.feed(chunk)):
                    return
            self._token.raise_if_cancelled()
            self._apply(reader.flush())

    # -------------------------------------------------------------- outcomes
    def _as_error(self, exc: Exception) -> TransportError:
        return TransportError(
            str(exc) or type(exc).__name__,
            provider=self._provider,
            model=self.model_id,
            code=classify_exception(exc),
            raw=exc,
        )

    def _fail(self, exc: ProviderError, event: str = "run.error") -> None:
        self.state.mark_errored(exc.message, exc.code.value)
        self._emit()
        normalized_log_event(
            _LOGGER,
            event,
            self._ctx,
            phase="finalize",
            error_code=exc.code.value,
            emitted=bool(self.state.accumulated_text),
            tokens=self._tokens(),
            level=logging.WARNING,
            error=exc.message,
            status=getattr(exc, "status", None),
        )

    def _cancelled(self, reason: Optional[str]) -> None:
        self.state.mark_errored(reason or "Cancelled", ErrorCode.CANCELLED.value)
        self._emit()
        normalized_log_event(
            _LOGGER,
            "run.cancelled",
            self._ctx,
            phase="finalize",
            error_code=ErrorCode.CANCELLED.value,
            emitted=bool(self.state.accumulated_text),
            tokens=self._tokens(),
            reason=reason,
        )

    async def execute(self) -> ModelRunState:
        """Run to a terminal state and return the (live) state object."""
        if self._started is None:
            self.begin()
        try:
            request = self._prepare()
        except ValidationError as exc:
            self._fail(exc, event="run.validation_error")
            return self.state
        except pydantic.ValidationError as exc:
            self._fail(
                ValidationError(str(exc), provider=self._provider, model=self.model_id),
                event="run.validation_error",
            )
            return self.state
        except Exception as exc:  # noqa: BLE001
            self._fail(self._as_error(exc))
            return self.state
        normalized_log_event(
            _LOGGER,
            "run.start",
            self._ctx,
            phase="start",
            attempt=1,
            url=request.url,
        )
        try:
            await self._stream(request)
        except asyncio.CancelledError:
            self._cancelled(self._token.reason)
            raise
        except CancelledError as exc:
            self._cancelled(exc.message)
        except ProviderError as exc:
            self._fail(exc)
        except Exception as exc:  # noqa: BLE001 - httpx and anything else raised mid-stream
            self._fail(self._as_error(exc))
        else:
            self.state.mark_complete()
            self._emit()
            normalized_log_event(
                _LOGGER,
                "run.end",
                self._ctx,
                phase="finalize",
                emitted=bool(self.state.accumulated_text),
                tokens=self._tokens(),
                cost=self.state.cost,
                elapsed_seconds=round(self.state.elapsed_seconds, 4),
                frames=self.state.frames_received,
            )
        return self.state


__all__ = ["ModelRun"]
