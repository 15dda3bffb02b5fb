"""Token cost computation.

Purpose
-------
Turn observed token counts and a model's :class:`Pricing` into a USD figure.
Cost is recomputed on every usage snapshot so partial runs show a live
estimate. An unpriced model, or one with no usage yet, has no cost at all
(``None``), which renders as absent rather than ``$0``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .models_parts.pricing import Pricing

TOKENS_PER_UNIT = 1_000_000


def compute_cost(
    input_tokens: Optional[int],
    output_tokens: Optional[int],
    pricing: "Optional[Pricing]",
) -> Optional[float]:
    """Return ``(in * input_price + out * output_price) / 1e6`` or ``None``.

    A missing count contributes zero once the other count is known.
    """
    if pricing is None:
        return None
    if input_tokens is None and output_tokens is None:
        return None
    inp = input_tokens or 0
    out = output_tokens or 0
    return (inp * pricing.input_per_million + out * pricing.output_per_million) / TOKENS_PER_UNIT


def format_cost(cost: Optional[float]) -> Optional[str]:
    """Render a cost as ``$0.004500``; ``None`` stays ``None``."""
    if cost is None:
        return None
    return f"${cost:.6f}"


__all__ = ["compute_cost", "format_cost", "TOKENS_PER_UNIT"]
