"""CLI action handlers.

Purpose
-------
Subcommand handlers for ``arena-cli``, keeping the entrypoint file minimal
(thin presentation layer). This module has no top-level side effects and is
safe to import in tests.

Fallback & Error Semantics
--------------------------
- Dry-run paths perform no network I/O. They load the catalog, consult the
  credential store for presence only and print redacted request plans.
- Execution paths run the aggregation controller. Per-model failures are
  reported in the summary and yield exit code ``1``; invalid arguments yield
  ``2`` with a JSON error on stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Mapping, Optional

import pydantic

from ...base.errors import ProviderError
from ...base.interfaces import CredentialStore
from ...base.models import ModelRunState, ProviderProfile, RunConfig, RunStatus
from ...base.repositories.keys import EnvCredentialStore
from ...base.request_build import build_request
from ...config import get_endpoints
from ..controller import AggregationController
from ..model_catalog_loader import CatalogError, load_catalog
from .cli_utils import format_state_line, format_summary, suppress_console_logs

_MISSING_KEY = "<missing>"


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect RunConfig overrides actually supplied on the command line."""
    raw = {
        "output_token_budget": getattr(args, "max_tokens", None),
        "temperature": getattr(args, "temperature", None),
        "reasoning_effort": getattr(args, "reasoning_effort", None),
        "thinking_budget": getattr(args, "thinking_budget", None),
        "web_search": True if getattr(args, "web_search", False) else None,
    }
    return {k: v for k, v in raw.items() if v is not None}


def config_for(profile: ProviderProfile, overrides: Mapping[str, Any]) -> RunConfig:
    """Return the per-model defaults with ``overrides`` applied (validated)."""
    base = RunConfig.defaults_for(profile)
    if not overrides:
        return base
    return RunConfig(**{**base.model_dump(), **overrides})


def plan_compare(
    *,
    model_ids: List[str],
    prompt: str,
    catalog: Mapping[str, ProviderProfile],
    credentials: CredentialStore,
    system_prompt: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    endpoints: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Compute the dry-run plan for a comparison without I/O.

    Returns
    -------
    Dict[str, Any]
        ``{"prompt_preview": ..., "models": [...]}`` where each entry carries
        the endpoint, redacted headers, request body and credential presence,
        or an ``error`` when the model would fail validation.
    """
    resolved_endpoints = dict(endpoints) if endpoints is not None else get_endpoints()
    entries: List[Dict[str, Any]] = []
    for mid in model_ids:
        profile = catalog.get(mid)
        if profile is None:
            entries.append({"model": mid, "error": f"Unknown model '{mid}'"})
            continue
        api_key = credentials.get(profile.wire_family.value)
        entry: Dict[str, Any] = {
            "model": mid,
            "name": profile.name,
            "wire_family": profile.wire_family.value,
            "api_key_present": bool(api_key),
        }
        try:
            config = config_for(profile, overrides or {})
            config.validate_for(profile)
            request = build_request(
                profile,
                prompt,
                config,
                api_key=api_key or _MISSING_KEY,
                endpoints=resolved_endpoints,
                system_prompt=system_prompt,
            )
        except ProviderError as exc:
            entry["error"] = exc.message
        except pydantic.ValidationError as exc:
            entry["error"] = str(exc)
        else:
            entry["endpoint"] = request.url
            entry["headers"] = request.redacted_headers()
            entry["body"] = request.body
        entries.append(entry)
    preview = f"{prompt[:64]}..." if len(prompt) > 64 else prompt
    return {"prompt_preview": preview, "models": entries}


def _load(args: argparse.Namespace) -> Optional[Dict[str, ProviderProfile]]:
    try:
        return load_catalog(getattr(args, "catalog", None))
    except (CatalogError, OSError) as exc:
        print(json.dumps({"error": f"catalog: {exc}"}), file=sys.stderr)
        return None


def handle_models(args: argparse.Namespace) -> int:
    """List catalog profiles, optionally filtered by wire family."""
    catalog = _load(args)
    if catalog is None:
        return 2
    profiles = [
        p for p in catalog.values() if not args.family or p.wire_family.value == args.family
    ]
    if args.json:
        print(json.dumps([p.to_dict() for p in profiles]))
        return 0
    for p in profiles:
        price = (
            f"${p.pricing.input_per_million:g}/${p.pricing.output_per_million:g} per 1M"
            if p.pricing
            else "unpriced"
        )
        print(f"{p.id:<40} {p.wire_family.value:<17} {p.category:<9} {price}")
    return 0


async def _execute(
    catalog: Mapping[str, ProviderProfile],
    configs: Mapping[str, Optional[RunConfig]],
    prompt: str,
    *,
    system_prompt: Optional[str],
    live: bool,
) -> Dict[str, ModelRunState]:
    last: Dict[str, RunStatus] = {}

    def _on_change(state: ModelRunState) -> None:
        if last.get(state.model_id) is state.status:
            return
        last[state.model_id] = state.status
        print(format_state_line(state), flush=True)

    async with AggregationController(catalog, EnvCredentialStore()) as controller:
        if live:
            controller.subscribe(_on_change)
        return await controller.run(prompt, configs, system_prompt=system_prompt)


def handle_compare(args: argparse.Namespace) -> int:
    """Execute the ``compare`` subcommand (dry-run plan or real run)."""
    catalog = _load(args)
    if catalog is None:
        return 2
    overrides = _overrides(args)
    if not args.execute:
        plan = plan_compare(
            model_ids=args.models,
            prompt=args.prompt,
            catalog=catalog,
            credentials=EnvCredentialStore(),
            system_prompt=args.system,
            overrides=overrides,
        )
        print(json.dumps(plan, indent=None if args.json else 2))
        return 0

    try:
        configs = {
            mid: (config_for(catalog[mid], overrides) if mid in catalog else None)
            for mid in args.models
        }
    except pydantic.ValidationError as exc:
        print(json.dumps({"error": str(exc)}), file=sys.stderr)
        return 2
    try:
        with suppress_console_logs():
            states = asyncio.run(
                _execute(catalog, configs, args.prompt, system_prompt=args.system, live=args.live)
            )
    except ProviderError as exc:
        print(json.dumps({"error": exc.message}), file=sys.stderr)
        return 2
    if args.json:
        print(json.dumps({mid: s.to_dict() for mid, s in states.items()}))
    else:
        print(format_summary(states))
    return 1 if any(s.status is RunStatus.ERRORED for s in states.values()) else 0


__all__ = ["config_for", "handle_compare", "handle_models", "plan_compare"]
