"""
ProviderProfile: static description of one selectable model.

Profiles are loaded once from the model catalog and never mutated. Identity is
the ``id`` field; two profiles with the same id describe the same model.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .pricing import Pricing
from .wire_family import WireFamily

_O_SERIES_PREFIXES = ("o1", "o3", "o4")


@dataclass(frozen=True)
class ProviderProfile:
    """Immutable model description.

    Attributes:
        id: Upstream model identifier sent in requests.
        name: Display name.
        provider: Provider key (``openai``, ``anthropic``, ``gemini``, ``openrouter``).
        wire_family: Streaming protocol used to talk to the model.
        pricing: Token pricing, or ``None`` when unpriced (cost stays absent).
        output_token_limit: Maximum output tokens the model accepts.
        supports_thinking: Accepts an extended-thinking budget.
        supports_reasoning_effort: Takes a reasoning effort instead of temperature.
        supports_verbosity: Accepts a text verbosity hint.
        category: Catalog grouping (``reasoning``, ``flagship``, ``fast``, ``coding``).
    """

    id: str
    name: str
    provider: str
    wire_family: WireFamily
    pricing: Optional[Pricing] = None
    output_token_limit: int = 4096
    supports_thinking: bool = False
    supports_reasoning_effort: bool = False
    supports_verbosity: bool = False
    category: str = "flagship"

    @property
    def is_o_series(self) -> bool:
        """Whether the id names an OpenAI o-series reasoning model."""
        return self.id.startswith(_O_SERIES_PREFIXES)

    @property
    def is_deep_research(self) -> bool:
        return "deep-research" in self.id

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["wire_family"] = self.wire_family.value
        return data


__all__ = ["ProviderProfile"]
