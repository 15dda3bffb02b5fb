"""Structured-parts (generate_content) wire family interpreter."""
from __future__ import annotations

from types import MappingProxyType

from arena_providers.base.streaming import Ignorable, StreamError, TextDelta, UsageSnapshot
from arena_providers.gemini import interpret_event


def _chunk(parts, usage=None, finish=None):
    candidate = {"content": {"role": "model", "parts": parts}}
    if finish:
        candidate["finishReason"] = finish
    event = {"candidates": [candidate]}
    if usage is not None:
        event["usageMetadata"] = usage
    return event


def test_text_then_cumulative_usage():
    out = list(interpret_event(_chunk([{"text": "Hello"}], {"promptTokenCount": 8, "candidatesTokenCount": 2})))
    assert out == [  # nosec B101
        TextDelta("Hello"),
        UsageSnapshot(input_tokens=8, output_tokens=2, is_final=False),
    ]


def test_thoughts_count_toward_output_and_finish_marks_final():
    usage = {"promptTokenCount": 8, "candidatesTokenCount": 20, "thoughtsTokenCount": 100}
    out = list(interpret_event(_chunk([{"text": "x"}], usage, finish="STOP")))
    assert out[-1] == UsageSnapshot(  # nosec B101
        input_tokens=8, output_tokens=120, is_final=True, reasoning_tokens=100
    )


def test_structured_parts_rendered_in_order():
    parts = [
        {"text": "Let me compute.\n"},
        {"executableCode": {"language": "PYTHON", "code": "print(2+2)"}},
        {"codeExecutionResult": {"outcome": "OUTCOME_OK", "output": "4"}},
    ]
    (delta,) = list(interpret_event(_chunk(parts)))
    assert delta == TextDelta(  # nosec B101
        "Let me compute.\n"
        "\n```python\nprint(2+2)\n```\n"
        "\n**Execution result (OUTCOME_OK)**\n```output\n4\n```\n"
    )


def test_blocked_prompt_and_empty_chunk():
    blocked = list(interpret_event({"promptFeedback": {"blockReason": "SAFETY"}}))
    assert blocked == [StreamError(message="prompt blocked: SAFETY", code="blocked")]  # nosec B101
    assert list(interpret_event({"candidates": []})) == [Ignorable("empty_chunk")]  # nosec B101


def test_error_object():
    out = list(interpret_event({"error": {"code": 503, "message": "busy", "status": "UNAVAILABLE"}}))
    assert out == [StreamError(message="busy", code="UNAVAILABLE")]  # nosec B101


def test_read_only_mappings_are_interpreted_like_dicts():
    error = MappingProxyType({"error": MappingProxyType({"message": "busy", "status": "UNAVAILABLE"})})
    assert list(interpret_event(error)) == [StreamError(message="busy", code="UNAVAILABLE")]  # nosec B101
    chunk = MappingProxyType(_chunk([{"text": "Hi"}]))
    assert list(interpret_event(chunk)) == [TextDelta("Hi")]  # nosec B101
