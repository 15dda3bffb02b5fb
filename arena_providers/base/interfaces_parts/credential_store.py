"""
Protocol for credential lookup by wire family.

The aggregation controller receives a ``CredentialStore`` at construction and
asks it for a key at the start of each run. It never reads environment
variables or other ambient state itself.

External dependencies: None.

Fallback semantics: returning ``None`` means "no credential"; the affected run
ends ``errored`` with code ``missing_credential`` and no network call is made.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CredentialStore(Protocol):
    """Structural contract for API key providers."""

    def get(self, wire_family: str) -> Optional[str]:  # pragma: no cover - interface
        """Return the API key for ``wire_family`` or ``None`` when absent."""
        ...


__all__ = ["CredentialStore"]
