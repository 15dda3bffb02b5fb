"""AggregationController behavior over a mocked network.

Every upstream is served by ``httpx.MockTransport``; scripts are keyed by the
model id found in the request body (or in the URL for generate_content).
"""
from __future__ import annotations

import asyncio
import dataclasses
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from arena_providers.base.errors import ValidationError
from arena_providers.base.models import ModelRunState, RunConfig, RunStatus
from arena_providers.base.repositories.keys import StaticCredentialStore
from arena_providers.config.defaults import DEFAULT_ENDPOINTS
from arena_providers.service.controller import AggregationController

Script = Callable[[httpx.Request], httpx.Response]


def _model_of(request: httpx.Request) -> str:
    body = json.loads(request.content or b"{}")
    if body.get("model"):
        return body["model"]
    return request.url.path.split("/models/")[1].split(":")[0]


def _stream(*chunks: bytes, hang: Optional[asyncio.Event] = None, before: Optional[Callable[[], None]] = None):
    async def gen():
        for chunk in chunks:
            if before is not None:
                before()
            yield chunk
        if hang is not None:
            await hang.wait()

    return gen()


def _ok(*chunks: bytes, **kw) -> httpx.Response:
    return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=_stream(*chunks, **kw))


class Harness:
    """Controller wired to a mock transport; records requested model ids."""

    def __init__(self, catalog, credentials, scripts: Dict[str, Script], clock=None) -> None:
        self.requests: List[str] = []
        self.scripts = scripts

        async def handler(request: httpx.Request) -> httpx.Response:
            model = _model_of(request)
            self.requests.append(model)
            return self.scripts[model](request)

        self.client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        kwargs: Dict[str, Any] = {"client": self.client, "endpoints": DEFAULT_ENDPOINTS}
        if clock is not None:
            kwargs["clock"] = clock
        self.controller = AggregationController(catalog, credentials, **kwargs)

    async def __aenter__(self) -> AggregationController:
        return self.controller

    async def __aexit__(self, *exc: object) -> None:
        await self.controller.aclose()
        await self.client.aclose()


RESPONSES_OK = [
    {"type": "response.created"},
    {"type": "response.output_text.delta", "delta": "Hel"},
    {"type": "response.output_text.delta", "delta": "lo"},
    {"type": "response.completed", "response": {"usage": {"input_tokens": 1000, "output_tokens": 500}}},
]


def _messages_ok(sse) -> bytes:
    return (
        b"event: message_start\n"
        + sse({"type": "message_start", "message": {"usage": {"input_tokens": 20, "output_tokens": 1}}})
        + b"event: content_block_delta\n"
        + sse({"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Bonjour"}})
        + sse({"type": "ping"})
        + b"data: {broken json\n\n"
        + sse({"type": "message_delta", "delta": {"stop_reason": "end_turn"}, "usage": {"output_tokens": 7}})
        + sse({"type": "message_stop"})
    )


@pytest.mark.asyncio
async def test_runs_are_isolated_and_malformed_frames_are_tolerated(catalog, credentials, sse):
    scripts = {
        "gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK)),
        "claude-sonnet-4-5": lambda r: _ok(_messages_ok(sse)),
        "meta-llama/llama-4-maverick": lambda r: httpx.Response(500, json={"error": {"message": "upstream exploded"}}),
        "gemini-2.5-flash": lambda r: _ok(
            sse(
                {"candidates": [{"content": {"parts": [{"text": "Hi "}]}}], "usageMetadata": {"promptTokenCount": 4}},
                {
                    "candidates": [{"content": {"parts": [{"text": "there"}]}, "finishReason": "STOP"}],
                    "usageMetadata": {"promptTokenCount": 4, "candidatesTokenCount": 3, "thoughtsTokenCount": 9},
                },
            )
        ),
    }
    async with Harness(catalog, credentials, scripts) as controller:
        states = await controller.run("Say hello", list(scripts))

    gpt = states["gpt-4.1"]
    assert gpt.status is RunStatus.COMPLETE and gpt.accumulated_text == "Hello"  # nosec B101
    assert (gpt.input_tokens, gpt.output_tokens) == (1000, 500)  # nosec B101
    assert gpt.cost == pytest.approx(0.006) and gpt.formatted_cost == "$0.006000"  # nosec B101

    claude = states["claude-sonnet-4-5"]
    assert claude.status is RunStatus.COMPLETE and claude.accumulated_text == "Bonjour"  # nosec B101
    assert (claude.input_tokens, claude.output_tokens) == (20, 7)  # nosec B101
    assert claude.frames_received == 8  # nosec B101

    llama = states["meta-llama/llama-4-maverick"]
    assert llama.status is RunStatus.ERRORED and llama.error_code == "server_error"  # nosec B101
    assert llama.error_message == "upstream exploded"  # nosec B101

    gemini = states["gemini-2.5-flash"]
    assert gemini.status is RunStatus.COMPLETE and gemini.accumulated_text == "Hi there"  # nosec B101
    assert (gemini.output_tokens, gemini.reasoning_tokens) == (12, 9)  # nosec B101


@pytest.mark.asyncio
async def test_budget_violation_errors_before_any_network_call(catalog, credentials, sse):
    harness = Harness(catalog, credentials, {"gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK))})
    bad = RunConfig(output_token_budget=1000, thinking_budget=2048)
    async with harness as controller:
        states = await controller.run("hi", {"claude-sonnet-4-5": bad, "gpt-4.1": None})

    claude = states["claude-sonnet-4-5"]
    assert claude.status is RunStatus.ERRORED and claude.error_code == "validation"  # nosec B101
    assert "must be greater than Thinking Budget" in (claude.error_message or "")  # nosec B101
    assert states["gpt-4.1"].status is RunStatus.COMPLETE  # nosec B101
    assert harness.requests == ["gpt-4.1"]  # nosec B101


@pytest.mark.asyncio
async def test_validation_short_circuit_makes_no_request(catalog, credentials, sse):
    harness = Harness(catalog, credentials, {})
    bad = RunConfig(output_token_budget=2048, thinking_budget=2048)
    async with harness as controller:
        states = await controller.run("hi", {"claude-sonnet-4-5": bad, "no-such-model": None})
    assert harness.requests == []  # nosec B101
    assert states["claude-sonnet-4-5"].error_code == "validation"  # nosec B101
    assert states["no-such-model"].status is RunStatus.ERRORED  # nosec B101
    assert "Unknown model" in (states["no-such-model"].error_message or "")  # nosec B101


@pytest.mark.asyncio
async def test_missing_credential_only_affects_that_family(catalog, sse):
    store = StaticCredentialStore({"responses": "sk-openai-dummy"})  # pragma: allowlist secret
    harness = Harness(catalog, store, {"gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK))})
    async with harness as controller:
        states = await controller.run("hi", ["gpt-4.1", "claude-sonnet-4-5"])
    claude = states["claude-sonnet-4-5"]
    assert claude.status is RunStatus.ERRORED and claude.error_code == "missing_credential"  # nosec B101
    assert claude.error_message == "Missing API Key for Claude 4.5 Sonnet"  # nosec B101
    assert states["gpt-4.1"].status is RunStatus.COMPLETE  # nosec B101
    assert harness.requests == ["gpt-4.1"]  # nosec B101


@pytest.mark.asyncio
async def test_non_2xx_is_classified_and_not_retried(catalog, credentials):
    harness = Harness(
        catalog,
        credentials,
        {"gpt-4.1": lambda r: httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})},
    )
    async with harness as controller:
        states = await controller.run("hi", ["gpt-4.1"])
    state = states["gpt-4.1"]
    assert state.error_code == "auth" and state.error_message == "Incorrect API key provided"  # nosec B101
    assert harness.requests == ["gpt-4.1"]  # nosec B101


@pytest.mark.asyncio
async def test_non_json_error_body_falls_back_to_status_line(catalog, credentials):
    harness = Harness(catalog, credentials, {"gpt-4.1": lambda r: httpx.Response(503, content=b"<html>down</html>")})
    async with harness as controller:
        states = await controller.run("hi", ["gpt-4.1"])
    assert states["gpt-4.1"].error_message == "Error 503: Service Unavailable"  # nosec B101
    assert states["gpt-4.1"].error_code == "unavailable"  # nosec B101


@pytest.mark.asyncio
async def test_transport_timeout_fails_only_that_run(catalog, credentials, sse):
    def _timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("stream idle", request=request)

    harness = Harness(
        catalog,
        credentials,
        {"gpt-4.1": _timeout, "claude-sonnet-4-5": lambda r: _ok(_messages_ok(sse))},
    )
    async with harness as controller:
        states = await controller.run("hi", ["gpt-4.1", "claude-sonnet-4-5"])
    assert states["gpt-4.1"].error_code == "timeout"  # nosec B101
    assert states["claude-sonnet-4-5"].status is RunStatus.COMPLETE  # nosec B101


@pytest.mark.asyncio
async def test_in_band_error_event_fails_run_and_keeps_partial_text(catalog, credentials, sse):
    body = sse(
        {"type": "content_block_delta", "delta": {"type": "text_delta", "text": "Part"}},
        {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
    )
    async with Harness(catalog, credentials, {"claude-sonnet-4-5": lambda r: _ok(body)}) as controller:
        states = await controller.run("hi", ["claude-sonnet-4-5"])
    state = states["claude-sonnet-4-5"]
    assert state.status is RunStatus.ERRORED and state.error_code == "unavailable"  # nosec B101
    assert state.error_message == "Overloaded" and state.accumulated_text == "Part"  # nosec B101


@pytest.mark.asyncio
async def test_cancel_interrupts_pending_read(catalog, credentials, sse, log_capture):
    never = asyncio.Event()
    first_text = asyncio.Event()
    script = lambda r: _ok(  # noqa: E731
        sse({"choices": [{"delta": {"content": "partial"}}]}), hang=never
    )
    async with Harness(catalog, credentials, {"meta-llama/llama-4-maverick": script}) as controller:
        controller.subscribe(lambda s: first_text.set() if s.accumulated_text else None)
        await controller.submit("hi", ["meta-llama/llama-4-maverick"])
        await asyncio.wait_for(first_text.wait(), timeout=5)
        assert controller.cancel("meta-llama/llama-4-maverick") is True  # nosec B101
        await controller.wait()
        state = controller.get_state("meta-llama/llama-4-maverick")
    assert state is not None  # nosec B101
    assert state.status is RunStatus.ERRORED and state.error_code == "cancelled"  # nosec B101
    assert state.accumulated_text == "partial"  # nosec B101
    assert any(p.get("event") == "run.cancelled" for p in log_capture)  # nosec B101


@pytest.mark.asyncio
async def test_resubmit_cancels_prior_run_and_replaces_state(catalog, credentials, sse):
    never = asyncio.Event()
    first_text = asyncio.Event()
    calls = {"n": 0}

    def script(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return _ok(sse({"choices": [{"delta": {"content": "old"}}]}), hang=never)
        return _ok(sse({"choices": [{"delta": {"content": "new"}}]}, done=True))

    seen: List[ModelRunState] = []
    async with Harness(catalog, credentials, {"meta-llama/llama-4-maverick": script}) as controller:
        controller.subscribe(seen.append)
        controller.subscribe(lambda s: first_text.set() if s.accumulated_text == "old" else None)
        first_id = await controller.submit("hi", ["meta-llama/llama-4-maverick"])
        await asyncio.wait_for(first_text.wait(), timeout=5)
        second_id = await controller.submit("hi again", ["meta-llama/llama-4-maverick"])
        await controller.wait()
        state = controller.get_state("meta-llama/llama-4-maverick")
    assert first_id != second_id  # nosec B101
    assert state is not None and state.run_id == second_id  # nosec B101
    assert state.status is RunStatus.COMPLETE and state.accumulated_text == "new"  # nosec B101
    old_final = [s for s in seen if s.run_id == first_id and s.is_terminal]
    assert old_final and old_final[-1].error_code == "cancelled"  # nosec B101


@pytest.mark.asyncio
async def test_failing_listener_is_logged_and_run_completes(catalog, credentials, sse, log_capture):
    def boom(_state: ModelRunState) -> None:
        raise RuntimeError("listener bug")

    got: List[RunStatus] = []
    async with Harness(catalog, credentials, {"gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK))}) as controller:
        controller.subscribe(boom)
        unsubscribe = controller.subscribe(lambda s: got.append(s.status))
        states = await controller.run("hi", ["gpt-4.1"])
        unsubscribe()
    assert states["gpt-4.1"].status is RunStatus.COMPLETE  # nosec B101
    assert got[0] is RunStatus.RUNNING and got[-1] is RunStatus.COMPLETE  # nosec B101
    assert any(p.get("event") == "controller.listener_error" for p in log_capture)  # nosec B101


@pytest.mark.asyncio
async def test_elapsed_and_time_to_first_token_use_injected_clock(catalog, credentials, sse, fake_clock):
    body = [
        sse({"type": "response.output_text.delta", "delta": "a"}),
        sse({"type": "response.completed", "response": {"usage": {"input_tokens": 1, "output_tokens": 1}}}),
    ]
    script = lambda r: _ok(*body, before=lambda: fake_clock.advance(250))  # noqa: E731
    async with Harness(catalog, credentials, {"gpt-4.1": script}, clock=fake_clock) as controller:
        states = await controller.run("hi", ["gpt-4.1"])
    state = states["gpt-4.1"]
    assert state.time_to_first_token_ms == pytest.approx(250.0)  # nosec B101
    assert state.elapsed_seconds == pytest.approx(0.5)  # nosec B101


@pytest.mark.asyncio
async def test_submit_rejects_empty_prompt_and_selection(catalog, credentials):
    async with Harness(catalog, credentials, {}) as controller:
        with pytest.raises(ValidationError):
            await controller.submit("   ", ["gpt-4.1"])
        with pytest.raises(ValidationError):
            await controller.submit("hi", [])
        assert controller.snapshot() == {}  # nosec B101


@pytest.mark.asyncio
async def test_select_and_deselect(catalog, credentials):
    async with Harness(catalog, credentials, {}) as controller:
        idle = controller.select("gpt-4.1")
        assert idle.status is RunStatus.IDLE  # nosec B101
        assert controller.get_state("gpt-4.1") is not None  # nosec B101
        await controller.deselect("gpt-4.1")
        assert controller.get_state("gpt-4.1") is None  # nosec B101


class _LockedKeyring:
    """Credential store whose Anthropic lookup fails outright."""

    def get(self, wire_family: str) -> Optional[str]:
        if wire_family == "messages":
            raise RuntimeError("keyring locked")
        return "sk-openai-dummy"  # pragma: allowlist secret


@pytest.mark.asyncio
async def test_credential_store_failure_is_recorded_not_reported_as_cancelled(catalog, sse, log_capture):
    harness = Harness(catalog, _LockedKeyring(), {"gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK))})
    async with harness as controller:
        states = await controller.run("hi", ["gpt-4.1", "claude-sonnet-4-5"])
    claude = states["claude-sonnet-4-5"]
    assert claude.status is RunStatus.ERRORED and claude.error_message == "keyring locked"  # nosec B101
    assert claude.error_code != "cancelled"  # nosec B101
    assert states["gpt-4.1"].status is RunStatus.COMPLETE  # nosec B101
    assert harness.requests == ["gpt-4.1"]  # nosec B101
    errors = [p for p in log_capture if p.get("event") == "run.error"]
    assert [p.get("model") for p in errors] == ["claude-sonnet-4-5"]  # nosec B101


@pytest.mark.asyncio
async def test_unusable_catalog_limit_fails_validation_for_that_model_only(catalog, credentials, sse):
    broken = dataclasses.replace(catalog["gpt-4.1"], id="gpt-4.1-zero", output_token_limit=0)
    catalog = {**catalog, broken.id: broken}
    harness = Harness(catalog, credentials, {"gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK))})
    async with harness as controller:
        states = await controller.run("hi", ["gpt-4.1", "gpt-4.1-zero"])
    assert states["gpt-4.1-zero"].status is RunStatus.ERRORED  # nosec B101
    assert states["gpt-4.1-zero"].error_code == "validation"  # nosec B101
    assert states["gpt-4.1"].status is RunStatus.COMPLETE  # nosec B101
    assert harness.requests == ["gpt-4.1"]  # nosec B101


@pytest.mark.asyncio
async def test_connection_drop_mid_stream_keeps_partial_text_and_spares_other_runs(catalog, credentials, sse):
    def _dropping(request: httpx.Request) -> httpx.Response:
        async def gen():
            for piece in "abc":
                yield sse({"choices": [{"delta": {"content": piece}}]})
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=gen())

    scripts = {
        "meta-llama/llama-4-maverick": _dropping,
        "gpt-4.1": lambda r: _ok(sse(*RESPONSES_OK)),
    }
    async with Harness(catalog, credentials, scripts) as controller:
        states = await controller.run("hi", list(scripts))
    llama = states["meta-llama/llama-4-maverick"]
    assert llama.status is RunStatus.ERRORED and llama.error_code == "transient"  # nosec B101
    assert llama.accumulated_text == "abc"  # nosec B101
    assert "peer closed" in (llama.error_message or "")  # nosec B101
    gpt = states["gpt-4.1"]
    assert gpt.status is RunStatus.COMPLETE and gpt.accumulated_text == "Hello"  # nosec B101
