"""Models parts package public surface.

Re-exports the individual model types; ``arena_providers.base.models``
remains the primary stable import path.
"""

from .wire_family import WireFamily
from .pricing import Pricing
from .provider_profile import ProviderProfile
from .run_config import RunConfig
from .run_state import ModelRunState, RunStatus

__all__ = [
    "WireFamily",
    "Pricing",
    "ProviderProfile",
    "RunConfig",
    "ModelRunState",
    "RunStatus",
]
