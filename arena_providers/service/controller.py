"""Aggregation controller.

Purpose
-------
Fan one prompt out to N selected models and own the ``model_id ->
ModelRunState`` mapping. Each selection runs as its own asyncio task with its
own cancellation token, so a failure, stall or cancellation in one model never
touches another.

Notes
-----
- State entries are only ever replaced by key; readers get detached copies.
- Resubmitting a model cancels and awaits its in-flight run before the fresh
  state is installed, so the previous connection is released first.
- The HTTP client is shared by all runs. A client built here is owned and
  closed by :meth:`aclose`; an injected client is left open.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import ErrorCode, ValidationError, classify_exception
from ..base.http import build_async_client
from ..base.interfaces import CredentialStore, StateListener
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import ModelRunState, ProviderProfile, RunConfig
from ..base.timeouts import TimeoutConfig
from ..config import get_endpoints
from .model_run import ModelRun

_LOGGER = get_logger("arena.controller")

Selections = Union[Mapping[str, Optional[RunConfig]], Iterable[str]]


def _normalize_selections(selections: Selections) -> Dict[str, Optional[RunConfig]]:
    if isinstance(selections, Mapping):
        return dict(selections)
    if isinstance(selections, str):
        return {selections: None}
    return {model_id: None for model_id in selections}


class AggregationController:
    """Concurrent multi-model runner with observable per-model state."""

    def __init__(
        self,
        catalog: Mapping[str, ProviderProfile],
        credentials: CredentialStore,
        *,
        client: Optional[httpx.AsyncClient] = None,
        endpoints: Optional[Mapping[str, str]] = None,
        timeout_config: Optional[TimeoutConfig] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._catalog = dict(catalog)
        self._credentials = credentials
        self._client = client
        self._owns_client = client is None
        self._endpoints = dict(endpoints) if endpoints is not None else get_endpoints()
        self._timeout_config = timeout_config
        self._clock = clock
        self._states: Dict[str, ModelRunState] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._tokens: Dict[str, CancellationToken] = {}
        self._listeners: List[StateListener] = []
        self._root = CancellationToken()

    # ----------------------------------------------------------- accessors
    @property
    def catalog(self) -> Dict[str, ProviderProfile]:
        return dict(self._catalog)

    def get_state(self, model_id: str) -> Optional[ModelRunState]:
        """Return a detached snapshot of one model's state (``None`` if unknown)."""
        state = self._states.get(model_id)
        return state.snapshot() if state is not None else None

    def snapshot(self) -> Dict[str, ModelRunState]:
        return {mid: state.snapshot() for mid, state in self._states.items()}

    def is_running(self, model_id: Optional[str] = None) -> bool:
        if model_id is None:
            return any(not task.done() for task in self._tasks.values())
        task = self._tasks.get(model_id)
        return task is not None and not task.done()

    # --------------------------------------------------------- subscription
    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener(snapshot)``; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, state: ModelRunState) -> None:
        if not self._listeners:
            return
        snap = state.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception as exc:  # noqa: BLE001
                normalized_log_event(
                    _LOGGER,
                    "controller.listener_error",
                    LogContext(model=state.model_id, run_id=state.run_id),
                    phase="controller",
                    level=logging.WARNING,
                    error=str(exc),
                    listener=getattr(listener, "__name__", repr(listener)),
                )

    # ------------------------------------------------------------ selection
    def select(self, model_id: str) -> ModelRunState:
        """Add an idle entry for ``model_id`` (no-op when already present)."""
        state = self._states.get(model_id)
        if state is None:
            state = ModelRunState(model_id=model_id)
            self._states[model_id] = state
            self._notify(state)
        return state.snapshot()

    async def deselect(self, model_id: str) -> None:
        """Cancel any run for ``model_id`` and drop its entry."""
        await self._cancel_and_wait(model_id, reason="deselected")
        self._states.pop(model_id, None)

    # -------------------------------------------------------------- running
    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client(timeout_config=self._timeout_config)
            self._owns_client = True
        return self._client

    async def _cancel_and_wait(self, model_id: str, reason: str) -> None:
        token = self._tokens.get(model_id)
        if token is not None:
            token.cancel(reason)
        task = self._tasks.get(model_id)
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)

    def _start(
        self,
        model_id: str,
        prompt: str,
        config: Optional[RunConfig],
        system_prompt: Optional[str],
        run_id: str,
    ) -> None:
        state = ModelRunState(model_id=model_id)
        self._states[model_id] = state
        token = self._root.child()
        run = ModelRun(
            model_id,
            self._catalog.get(model_id),
            state,
            prompt=prompt,
            config=config,
            client=self._ensure_client(),
            credentials=self._credentials,
            endpoints=self._endpoints,
            token=token,
            notify=self._notify,
            system_prompt=system_prompt,
            run_id=run_id,
            clock=self._clock,
        )
        run.begin()
        task = asyncio.create_task(run.execute(), name=f"arena-run:{model_id}")
        remove = token.on_cancel(lambda _reason: task.cancel())
        self._tasks[model_id] = task
        self._tokens[model_id] = token

        def _done(finished: asyncio.Task) -> None:
            remove()
            self._root.unlink_child(token)
            if self._tasks.get(model_id) is finished:
                del self._tasks[model_id]
                self._tokens.pop(model_id, None)
            error = None if finished.cancelled() else finished.exception()
            if state.is_terminal:
                return
            if error is not None:
                code = classify_exception(error)
                state.mark_errored(str(error) or type(error).__name__, code.value)
                normalized_log_event(
                    _LOGGER,
                    "run.error",
                    LogContext(model=model_id, run_id=run_id),
                    phase="finalize",
                    error_code=code.value,
                    level=logging.WARNING,
                    error=str(error),
                )
            else:
                # cancelled before the first step of the task ran
                state.mark_errored(token.reason or "Cancelled", ErrorCode.CANCELLED.value)
            self._notify(state)

        task.add_done_callback(_done)

    async def submit(
        self,
        prompt: str,
        selections: Selections,
        *,
        system_prompt: Optional[str] = None,
    ) -> str:
        """Start one independent run per selected model; returns the run id.

        ``selections`` is either an iterable of model ids (catalog defaults
        are used) or a mapping ``{model_id: RunConfig | None}``. An empty
        prompt or selection raises :class:`ValidationError` and starts nothing.
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt must not be empty")
        plan = _normalize_selections(selections)
        if not plan:
            raise ValidationError("Select at least one model")
        run_id = uuid.uuid4().hex
        normalized_log_event(
            _LOGGER,
            "controller.submit",
            LogContext(run_id=run_id),
            phase="controller",
            models=list(plan),
            prompt_chars=len(prompt),
        )
        for model_id in plan:
            await self._cancel_and_wait(model_id, reason="resubmitted")
        for model_id, config in plan.items():
            self._start(model_id, prompt, config, system_prompt, run_id)
        return run_id

    def cancel(self, model_id: Optional[str] = None, reason: str = "Cancelled") -> bool:
        """Request cancellation of one run, or of every run when ``model_id`` is None.

        Returns ``True`` when at least one in-flight run was signalled.
        """
        targets = list(self._tokens) if model_id is None else [model_id]
        signalled = False
        for mid in targets:
            token = self._tokens.get(mid)
            if token is None or not self.is_running(mid):
                continue
            token.cancel(reason)
            signalled = True
        return signalled

    async def wait(self) -> Dict[str, ModelRunState]:
        """Await every in-flight run and return a snapshot of all states."""
        pending = [task for task in self._tasks.values() if not task.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [task for task in self._tasks.values() if not task.done()]
        return self.snapshot()

    async def run(
        self,
        prompt: str,
        selections: Selections,
        *,
        system_prompt: Optional[str] = None,
    ) -> Dict[str, ModelRunState]:
        """``submit`` followed by ``wait``; returns snapshots for the selection."""
        plan = _normalize_selections(selections)
        await self.submit(prompt, plan, system_prompt=system_prompt)
        await self.wait()
        return {mid: self._states[mid].snapshot() for mid in plan if mid in self._states}

    async def aclose(self) -> None:
        """Cancel all runs, await them and close an owned HTTP client."""
        self.cancel(reason="controller closed")
        await self.wait()
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "AggregationController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["AggregationController", "Selections"]
