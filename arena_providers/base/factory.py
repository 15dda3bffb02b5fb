"""Wire-family registry.

Purpose
-------
Resolve the per-family collaborators (event interpreter, request body
builder, credential header builder) from a lookup table keyed by
:class:`WireFamily`. Provider modules are imported lazily with ``importlib``
so the base layer never imports provider packages at module load.

Each provider module exposes three callables named in ``_FAMILIES``:

- ``interpret_event(event) -> Delta | tuple[Delta, ...]``
- ``build_body(profile, prompt, config, system_prompt) -> dict``
- ``build_headers(api_key) -> dict``
"""

from __future__ import annotations

from functools import lru_cache
from importlib import import_module
from typing import Any, Callable, Dict, Tuple

from .models_parts.wire_family import WireFamily


class UnknownWireFamilyError(LookupError):
    """Raised when a wire family has no registered provider module or hook."""


_FAMILIES: Dict[WireFamily, Dict[str, str]] = {
    WireFamily.RESPONSES: {
        "interpreter": "arena_providers.openai.responses_stream:interpret_event",
        "builder": "arena_providers.openai.chat_helpers:build_body",
        "headers": "arena_providers.openai.chat_helpers:build_headers",
    },
    WireFamily.MESSAGES: {
        "interpreter": "arena_providers.anthropic.stream_helpers:interpret_event",
        "builder": "arena_providers.anthropic.chat_helpers:build_body",
        "headers": "arena_providers.anthropic.chat_helpers:build_headers",
    },
    WireFamily.CHAT_COMPLETIONS: {
        "interpreter": "arena_providers.openrouter.stream_helpers:interpret_event",
        "builder": "arena_providers.openrouter.chat_helpers:build_body",
        "headers": "arena_providers.openrouter.chat_helpers:build_headers",
    },
    WireFamily.GENERATE_CONTENT: {
        "interpreter": "arena_providers.gemini.stream_helpers:interpret_event",
        "builder": "arena_providers.gemini.chat_helpers:build_body",
        "headers": "arena_providers.gemini.chat_helpers:build_headers",
    },
}


@lru_cache(maxsize=None)
def _resolve(family: WireFamily, hook: str) -> Callable[..., Any]:
    target = _FAMILIES.get(family, {}).get(hook)
    if not target:
        raise UnknownWireFamilyError(f"No {hook} registered for wire family '{family.value}'")
    module_path, attr = target.split(":", 1)
    try:
        mod = import_module(module_path)
    except ImportError as exc:  # pragma: no cover - packaging failure path
        raise UnknownWireFamilyError(f"Failed to import '{module_path}' for '{family.value}': {exc}") from exc
    try:
        return getattr(mod, attr)
    except AttributeError as exc:
        raise UnknownWireFamilyError(f"'{attr}' not found in '{module_path}' for '{family.value}'") from exc


def get_interpreter(family: WireFamily | str) -> Callable[[Any], Any]:
    return _resolve(WireFamily.parse(family), "interpreter")


def get_body_builder(family: WireFamily | str) -> Callable[..., Dict[str, Any]]:
    return _resolve(WireFamily.parse(family), "builder")


def get_header_builder(family: WireFamily | str) -> Callable[[str], Dict[str, str]]:
    return _resolve(WireFamily.parse(family), "headers")


def supported() -> Tuple[WireFamily, ...]:
    """Return the registered wire families in deterministic order."""
    return tuple(_FAMILIES.keys())


__all__ = [
    "UnknownWireFamilyError",
    "get_interpreter",
    "get_body_builder",
    "get_header_builder",
    "supported",
]
