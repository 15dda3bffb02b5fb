"""
Domain models public surface.

Re-exports the one-class-per-file implementations under
``arena_providers.base.models_parts``.
"""

from .models_parts.wire_family import WireFamily
from .models_parts.pricing import Pricing
from .models_parts.provider_profile import ProviderProfile
from .models_parts.run_config import RunConfig
from .models_parts.run_state import ModelRunState, RunStatus

__all__ = [
    "WireFamily",
    "Pricing",
    "ProviderProfile",
    "RunConfig",
    "ModelRunState",
    "RunStatus",
]
