"""ModelRunState mutation helpers."""
from __future__ import annotations

import pytest

from arena_providers.base.models import ModelRunState, Pricing, RunStatus

PRICING = Pricing(1.5, 6.0)


def test_usage_is_monotonic_and_cost_recomputed():
    state = ModelRunState(model_id="m")
    state.apply_usage(input_tokens=1000, output_tokens=None, reasoning_tokens=None, pricing=PRICING)
    assert state.cost == pytest.approx(0.0015)  # nosec B101
    state.apply_usage(input_tokens=None, output_tokens=500, reasoning_tokens=None, pricing=PRICING)
    assert (state.input_tokens, state.output_tokens) == (1000, 500)  # nosec B101
    assert state.cost == pytest.approx(0.0045)  # nosec B101
    state.apply_usage(input_tokens=None, output_tokens=400, reasoning_tokens=None, pricing=PRICING)
    assert state.output_tokens == 500  # nosec B101


def test_unpriced_cost_stays_absent():
    state = ModelRunState(model_id="m")
    state.apply_usage(input_tokens=10, output_tokens=10, reasoning_tokens=None, pricing=None)
    assert state.cost is None and state.formatted_cost is None  # nosec B101


def test_snapshot_is_detached():
    state = ModelRunState(model_id="m")
    state.mark_running("r1")
    snap = state.snapshot()
    state.append_text("late")
    state.mark_complete()
    assert snap.accumulated_text == "" and snap.status is RunStatus.RUNNING  # nosec B101
    assert state.is_terminal and not snap.is_terminal  # nosec B101


def test_to_dict_serializes_status_and_cost():
    state = ModelRunState(model_id="m")
    state.mark_errored("boom", "auth")
    data = state.to_dict()
    assert data["status"] == "errored" and data["error_code"] == "auth"  # nosec B101
    assert data["formatted_cost"] is None  # nosec B101
