"""Structured logging context for run events.

:class:`LogContext` carries the fields shared by every event of one model run
(provider, model, wire family, run id) plus free-form extras.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Context merged into each structured log payload."""

    provider: Optional[str] = None
    model: Optional[str] = None
    wire_family: Optional[str] = None
    run_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
