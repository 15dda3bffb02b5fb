"""
Per-model token pricing.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Pricing:
    """USD price per one million input and output tokens."""

    input_per_million: float
    output_per_million: float


__all__ = ["Pricing"]
