"""Anthropic Messages API request helpers.

Purpose:
- Build the streaming ``/v1/messages`` body for one run.
- Build the ``x-api-key``/``anthropic-version`` headers.

Notes:
- System prompts travel in the top-level ``system`` field, not as a message.
- With extended thinking enabled the API requires temperature 1.0; the
  budget invariant is checked earlier by ``RunConfig.validate_for``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models_parts.provider_profile import ProviderProfile
from ..base.models_parts.run_config import RunConfig
from ..config.defaults import ANTHROPIC_API_VERSION, THINKING_TEMPERATURE

WEB_SEARCH_TOOL = {"type": "web_search_20250305", "name": "web_search"}


def build_body(
    profile: ProviderProfile,
    prompt: str,
    config: RunConfig,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the Messages API body for a streaming run."""
    body: Dict[str, Any] = {
        "model": profile.id,
        "messages": [{"role": "user", "content": prompt}],
        "max_tokens": config.output_token_budget,
        "stream": True,
        "temperature": config.temperature,
    }
    if system_prompt and system_prompt.strip():
        body["system"] = system_prompt
    if profile.supports_thinking and config.thinking_enabled:
        body["thinking"] = {"type": "enabled", "budget_tokens": config.thinking_budget}
        body["temperature"] = THINKING_TEMPERATURE
    if config.web_search:
        body["tools"] = [dict(WEB_SEARCH_TOOL)]
    return body


def build_headers(api_key: str) -> Dict[str, str]:
    return {"x-api-key": api_key, "anthropic-version": ANTHROPIC_API_VERSION}


__all__ = ["build_body", "build_headers"]
