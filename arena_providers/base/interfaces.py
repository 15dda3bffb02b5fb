"""
Collaborator interfaces (Protocols) for the aggregation engine.

The controller depends only on these structural contracts, so credential
storage and presentation layers can be swapped without touching the run loop.
"""

from __future__ import annotations

from .interfaces_parts.credential_store import CredentialStore
from .interfaces_parts.state_listener import StateListener

__all__ = ["CredentialStore", "StateListener"]
