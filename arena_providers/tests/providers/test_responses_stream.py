"""Responses wire family interpreter."""
from __future__ import annotations

from arena_providers.base.streaming import Ignorable, StreamError, TextDelta, UsageSnapshot
from arena_providers.openai import interpret_event


def test_output_text_delta():
    assert interpret_event({"type": "response.output_text.delta", "delta": "Hel"}) == TextDelta("Hel")  # nosec B101


def test_completed_carries_final_usage_with_reasoning_split_out():
    event = {
        "type": "response.completed",
        "response": {
            "usage": {
                "input_tokens": 1000,
                "output_tokens": 500,
                "output_tokens_details": {"reasoning_tokens": 320},
            }
        },
    }
    assert interpret_event(event) == UsageSnapshot(  # nosec B101
        input_tokens=1000, output_tokens=500, is_final=True, reasoning_tokens=320
    )


def test_reasoning_summary_and_bookkeeping_events_are_ignorable():
    for kind in (
        "response.reasoning_summary_text.delta",
        "response.output_item.added",
        "response.created",
    ):
        assert isinstance(interpret_event({"type": kind, "delta": "x"}), Ignorable)  # nosec B101


def test_error_and_failed_events_become_stream_errors():
    err = interpret_event({"type": "error", "error": {"message": "quota", "code": "insufficient_quota"}})
    assert err == StreamError(message="quota", code="insufficient_quota")  # nosec B101
    failed = interpret_event(
        {"type": "response.failed", "response": {"error": {"message": "server_error", "code": "server_error"}}}
    )
    assert failed == StreamError(message="server_error", code="server_error")  # nosec B101


def test_incomplete_response_still_reports_usage():
    event = {"type": "response.incomplete", "response": {"usage": {"input_tokens": 9, "output_tokens": 4096}}}
    snap = interpret_event(event)
    assert isinstance(snap, UsageSnapshot) and snap.output_tokens == 4096  # nosec B101
