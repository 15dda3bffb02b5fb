"""
ModelRunState: live observable state of one model run.

Only the owning run mutates an instance; everyone else reads detached copies
produced by :meth:`ModelRunState.snapshot`. Text is append-only and token
counts never decrease within one run.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional

from ..cost import compute_cost, format_cost
from .pricing import Pricing


class RunStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    ERRORED = "errored"

    @property
    def terminal(self) -> bool:
        return self in (RunStatus.COMPLETE, RunStatus.ERRORED)


def _max_or_new(prev: Optional[int], new: Optional[int]) -> Optional[int]:
    if new is None:
        return prev
    if prev is None:
        return new
    return max(prev, new)


@dataclass
class ModelRunState:
    """Per-model run record owned by the aggregation controller.

    Attributes:
        model_id: Catalog id of the model.
        status: Lifecycle status (idle, running, complete, errored).
        accumulated_text: Concatenated text deltas in arrival order.
        input_tokens / output_tokens: Latest usage counts (monotonic).
        reasoning_tokens: Hidden reasoning tokens, already part of ``output_tokens``.
        cost: Derived USD cost; ``None`` when unpriced or no usage seen.
        elapsed_seconds: Wall time from run start to now or to the terminal state.
        error_message / error_code: Failure cause once ``errored``.
        time_to_first_token_ms: Latency until the first text delta.
        frames_received: Frames seen, including ignorable ones.
        run_id: Identifier of the submission that produced this state.
    """

    model_id: str
    status: RunStatus = RunStatus.IDLE
    accumulated_text: str = ""
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    reasoning_tokens: Optional[int] = None
    cost: Optional[float] = None
    elapsed_seconds: float = 0.0
    error_message: Optional[str] = None
    error_code: Optional[str] = None
    time_to_first_token_ms: Optional[float] = None
    frames_received: int = 0
    run_id: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status.terminal

    @property
    def formatted_cost(self) -> Optional[str]:
        return format_cost(self.cost)

    def append_text(self, text: str) -> None:
        self.accumulated_text += text

    def apply_usage(
        self,
        *,
        input_tokens: Optional[int],
        output_tokens: Optional[int],
        reasoning_tokens: Optional[int],
        pricing: Optional[Pricing],
    ) -> None:
        """Merge a usage snapshot and recompute cost.

        Counts absent from the snapshot keep their prior value. Cumulative
        snapshots replace earlier values; the max guard keeps counts monotonic.
        """
        self.input_tokens = _max_or_new(self.input_tokens, input_tokens)
        self.output_tokens = _max_or_new(self.output_tokens, output_tokens)
        self.reasoning_tokens = _max_or_new(self.reasoning_tokens, reasoning_tokens)
        self.cost = compute_cost(self.input_tokens, self.output_tokens, pricing)

    def mark_running(self, run_id: str) -> None:
        self.status = RunStatus.RUNNING
        self.run_id = run_id

    def mark_complete(self) -> None:
        self.status = RunStatus.COMPLETE

    def mark_errored(self, message: str, code: Optional[str] = None) -> None:
        self.status = RunStatus.ERRORED
        self.error_message = message
        self.error_code = code

    def snapshot(self) -> "ModelRunState":
        """Return a detached copy safe to hand to readers."""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["formatted_cost"] = self.formatted_cost
        return data


__all__ = ["ModelRunState", "RunStatus"]
