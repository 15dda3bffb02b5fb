"""arena_providers package

Multi-provider streaming response aggregation: one prompt, N models, each
decoded from its own wire format into live per-model text, token and cost
state.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`,
      :class:`ValidationError`, :class:`TransportError`
    - Engine: :class:`AggregationController`, :class:`ModelRunState`,
      :class:`RunConfig`, :class:`ProviderProfile`, :func:`load_catalog`
    - Helpers: :func:`create_controller`, :func:`compare`

Notes:
    - Credentials are injected through a ``CredentialStore``. The helpers
      default to :class:`EnvCredentialStore`, which reads the provider key
      environment variables only when a run asks for them.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from .base.errors import ErrorCode, ProviderError, TransportError, ValidationError
from .base.interfaces import CredentialStore
from .base.models import ModelRunState, ProviderProfile, RunConfig, RunStatus, WireFamily
from .base.repositories.keys import EnvCredentialStore, StaticCredentialStore
from .service.controller import AggregationController, Selections
from .service.model_catalog_loader import load_catalog

__version__ = "0.1.0"


def create_controller(
    *,
    catalog: Optional[Mapping[str, ProviderProfile]] = None,
    credentials: Optional[CredentialStore] = None,
    **kwargs,
) -> AggregationController:
    """Build a controller over the packaged catalog and environment keys.

    ``kwargs`` are forwarded to :class:`AggregationController` (``client``,
    ``endpoints``, ``timeout_config``).
    """
    return AggregationController(
        catalog if catalog is not None else load_catalog(),
        credentials if credentials is not None else EnvCredentialStore(),
        **kwargs,
    )


async def compare(
    prompt: str,
    selections: Selections,
    *,
    system_prompt: Optional[str] = None,
    **kwargs,
) -> Dict[str, ModelRunState]:
    """Run ``prompt`` against every selected model and return final snapshots."""
    async with create_controller(**kwargs) as controller:
        return await controller.run(prompt, selections, system_prompt=system_prompt)


__all__ = [
    # Version
    "__version__",
    # Exceptions
    "ProviderError",
    "ErrorCode",
    "ValidationError",
    "TransportError",
    # Engine
    "AggregationController",
    "ModelRunState",
    "RunStatus",
    "RunConfig",
    "ProviderProfile",
    "WireFamily",
    "load_catalog",
    "EnvCredentialStore",
    "StaticCredentialStore",
    # Helpers
    "create_controller",
    "compare",
]
