"""Single-type interface modules re-exported by ``arena_providers.base.interfaces``."""

from .credential_store import CredentialStore
from .state_listener import StateListener

__all__ = ["CredentialStore", "StateListener"]
