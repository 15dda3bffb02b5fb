"""Model catalog loader.

Reads provider-centric YAML documents from ``arena_providers/catalog/providers``
and materializes them into immutable :class:`ProviderProfile` instances keyed
by model id.

YAML Schema (per-provider)
-------------------------

.. code-block:: yaml

    provider: anthropic
    display_name: Anthropic
    wire_family: messages
    models:
      - id: claude-sonnet-4-5-20250929
        name: Claude 4.5 Sonnet
        category: flagship
        output_token_limit: 64000
        supports_thinking: true
        pricing: {input: 3, output: 15}   # USD per 1M tokens

``provider``, ``wire_family`` and ``models`` are required at the document
level; ``wire_family`` may be overridden per model. Entries without
``pricing`` are unpriced and report no cost.

``ARENA_CATALOG_FILE`` points the loader at a single YAML file or a directory
of YAML files instead of the packaged catalog.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..base.models_parts.pricing import Pricing
from ..base.models_parts.provider_profile import ProviderProfile
from ..base.models_parts.wire_family import WireFamily

CATALOG_ENV = "ARENA_CATALOG_FILE"


class CatalogError(ValueError):
    """Raised when a catalog document is mis-shaped."""


def _default_catalog_root() -> Path:
    """Return the packaged catalog root (``arena_providers/catalog/providers``)."""
    # parents[0] - service/
    # parents[1] - arena_providers/
    return Path(__file__).resolve().parents[1] / "catalog" / "providers"


def _coerce_int(val: Any, default: int) -> int:
    if val is None:
        return default
    try:
        return int(val)
    except (TypeError, ValueError):
        return default


def _coerce_pricing(raw: Any, path: Path, mid: str) -> Optional[Pricing]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise CatalogError(f"{path}: pricing for '{mid}' must be a mapping")
    try:
        return Pricing(
            input_per_million=float(raw.get("input", 0)),
            output_per_million=float(raw.get("output", 0)),
        )
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"{path}: invalid pricing for '{mid}': {exc}") from exc


def _load_yaml_document(path: Path) -> Dict[str, Any]:
    data: Any = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog file {path} must contain a mapping at top level.")
    return data


def _profile_from_entry(provider: str, family: Optional[str], entry: Dict[str, Any], path: Path) -> ProviderProfile:
    mid = str(entry.get("id") or "").strip()
    if not mid:
        raise CatalogError(f"{path}: model entry without id")
    raw_family = entry.get("wire_family") or family
    if not raw_family:
        raise CatalogError(f"{path}: no wire_family for '{mid}'")
    try:
        wire_family = WireFamily.parse(raw_family)
    except ValueError as exc:
        raise CatalogError(f"{path}: unknown wire_family '{raw_family}' for '{mid}'") from exc
    return ProviderProfile(
        id=mid,
        name=str(entry.get("name") or mid),
        provider=provider,
        wire_family=wire_family,
        pricing=_coerce_pricing(entry.get("pricing"), path, mid),
        output_token_limit=_coerce_int(entry.get("output_token_limit"), 4096),
        supports_thinking=bool(entry.get("supports_thinking", False)),
        supports_reasoning_effort=bool(entry.get("supports_reasoning_effort", False)),
        supports_verbosity=bool(entry.get("supports_verbosity", False)),
        category=str(entry.get("category") or "flagship"),
    )


def discover_catalog_files(root: Optional[Path] = None) -> List[Path]:
    """Return catalog YAML files for ``root`` (a file or a directory)."""
    base = root or _default_catalog_root()
    if base.is_file():
        return [base]
    if not base.exists():
        return []
    return sorted(p for p in base.glob("*.yaml") if p.is_file())


def load_catalog(path: Optional[Path | str] = None) -> Dict[str, ProviderProfile]:
    """Load every catalog document into ``{model_id: ProviderProfile}``.

    Resolution order for the source: explicit ``path`` argument,
    ``ARENA_CATALOG_FILE``, then the packaged catalog. A later duplicate id
    replaces an earlier one.
    """
    override = path or os.getenv(CATALOG_ENV)
    root = Path(override).expanduser() if override else None
    profiles: Dict[str, ProviderProfile] = {}
    for file in discover_catalog_files(root):
        doc = _load_yaml_document(file)
        provider = str(doc.get("provider") or file.stem).lower().strip()
        raw_models: Any = doc.get("models") or []
        if not isinstance(raw_models, list):
            raise CatalogError(
                f"Catalog file {file} must define 'models' as a list; got {type(raw_models)!r} instead."
            )
        for item in raw_models:
            if not isinstance(item, dict):
                continue
            profile = _profile_from_entry(provider, doc.get("wire_family"), item, file)
            profiles[profile.id] = profile
    return profiles


__all__ = [
    "CatalogError",
    "discover_catalog_files",
    "load_catalog",
]
