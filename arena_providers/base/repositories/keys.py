"""
Credential stores.

Purpose
- Implement the ``CredentialStore`` contract used by the aggregation
  controller: ``get(wire_family) -> str | None``.
- Keep environment access inside ``EnvCredentialStore``; the controller only
  ever talks to the injected store.

Design
- Non-throwing accessors that return ``None`` when a key is not resolved.
- ``get_resolution`` reports where a key came from for the CLI dry run
  without exposing the key itself.

Usage
- store = ChainedCredentialStore(StaticCredentialStore({...}), EnvCredentialStore())
- key = store.get("messages")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ...config.env import is_placeholder, resolve_family_key


@dataclass
class KeyResolution:
    wire_family: str
    api_key: Optional[str]
    source: str  # "env", "static", "none"
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def present(self) -> bool:
        return bool(self.api_key)


def _normalize(wire_family: Any) -> str:
    return str(getattr(wire_family, "value", wire_family) or "").lower().strip()


class EnvCredentialStore:
    """Resolve keys from environment variables (alias-aware, placeholder-safe).

    The environment is read on every call, never cached, so keys exported
    after construction are picked up by the next run.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = environ

    def get(self, wire_family: str) -> Optional[str]:
        return self.get_resolution(wire_family).api_key

    def get_resolution(self, wire_family: str) -> KeyResolution:
        family = _normalize(wire_family)
        val, used = resolve_family_key(family, self._environ)
        if val:
            return KeyResolution(wire_family=family, api_key=val, source="env", extra={"env_var": used})
        return KeyResolution(wire_family=family, api_key=None, source="none")


class StaticCredentialStore:
    """Keys supplied up front, e.g. from a settings screen or a test."""

    def __init__(self, keys: Optional[Mapping[str, str]] = None) -> None:
        self._keys: Dict[str, str] = {}
        for family, key in (keys or {}).items():
            self.set(family, key)

    def set(self, wire_family: str, api_key: Optional[str]) -> None:
        family = _normalize(wire_family)
        value = (api_key or "").strip()
        if value and not is_placeholder(value):
            self._keys[family] = value
        else:
            self._keys.pop(family, None)

    def get(self, wire_family: str) -> Optional[str]:
        return self._keys.get(_normalize(wire_family))

    def get_resolution(self, wire_family: str) -> KeyResolution:
        family = _normalize(wire_family)
        key = self._keys.get(family)
        return KeyResolution(wire_family=family, api_key=key, source="static" if key else "none")


class ChainedCredentialStore:
    """Try several stores in order; the first non-empty key wins."""

    def __init__(self, *stores: Any) -> None:
        self._stores = stores

    def get(self, wire_family: str) -> Optional[str]:
        return self.get_resolution(wire_family).api_key

    def get_resolution(self, wire_family: str) -> KeyResolution:
        family = _normalize(wire_family)
        for store in self._stores:
            if hasattr(store, "get_resolution"):
                res = store.get_resolution(family)
                if res.present:
                    return res
            elif key := store.get(family):
                return KeyResolution(wire_family=family, api_key=key, source=type(store).__name__)
        return KeyResolution(wire_family=family, api_key=None, source="none")


__all__ = [
    "KeyResolution",
    "EnvCredentialStore",
    "StaticCredentialStore",
    "ChainedCredentialStore",
]
