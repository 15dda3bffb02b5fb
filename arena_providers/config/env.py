"""arena_providers.config.env
==========================

Environment variables holding each wire family's API key.

``KEY_ENV_VARS`` lists, per family, the variable names tried in order. The
first set, non-placeholder value wins. Lookups never raise: an unknown family
or an unset variable resolves to ``None`` and the caller decides what that
means (the run loop reports ``missing_credential``).
"""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional, Tuple

KEY_ENV_VARS: Dict[str, Tuple[str, ...]] = {
    "responses": ("OPENAI_API_KEY",),
    "messages": ("ANTHROPIC_API_KEY",),
    "chat_completions": ("OPENROUTER_API_KEY",),
    "generate_content": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """Whether ``val`` is a template value rather than a real key.

    Case-insensitive: contains one of ``placeholder``/``changeme``/``example``
    or starts with ``test_``.
    """
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(marker in lowered for marker in _PLACEHOLDER_MARKERS)


def key_env_vars(family: str) -> Tuple[str, ...]:
    return KEY_ENV_VARS.get((family or "").strip().lower(), ())


def resolve_family_key(
    family: str, environ: Optional[Mapping[str, str]] = None
) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for ``family`` or ``(None, None)``."""
    env = os.environ if environ is None else environ
    for name in key_env_vars(family):
        val = (env.get(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "KEY_ENV_VARS",
    "is_placeholder",
    "key_env_vars",
    "resolve_family_key",
]
