"""OpenRouter chat-completions request helpers.

Purpose:
- Build the streaming ``/chat/completions`` body for one run.
- Build the bearer header plus OpenRouter's attribution headers.

Notes:
- ``stream_options.include_usage`` asks the upstream to emit one extra frame
  carrying the usage object after the last text chunk.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models_parts.provider_profile import ProviderProfile
from ..base.models_parts.run_config import RunConfig
from ..base.request_build import build_messages
from ..config.defaults import DEFAULT_REASONING_EFFORT, OPENROUTER_REFERER, OPENROUTER_TITLE


def _response_format(config: RunConfig) -> Optional[Dict[str, Any]]:
    if config.response_format == "json_object":
        return {"type": "json_object"}
    if config.response_format == "json_schema":
        return {"type": "json_schema", "json_schema": {"name": "response", "schema": config.json_schema}}
    return None


def build_body(
    profile: ProviderProfile,
    prompt: str,
    config: RunConfig,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the chat-completions body for a streaming run."""
    body: Dict[str, Any] = {
        "model": profile.id,
        "messages": build_messages(prompt, system_prompt),
        "stream": True,
        "stream_options": {"include_usage": True},
        "max_tokens": config.output_token_budget,
    }
    if profile.supports_reasoning_effort:
        body["reasoning"] = {"effort": config.reasoning_effort or DEFAULT_REASONING_EFFORT}
    else:
        body["temperature"] = config.temperature
    if profile.supports_thinking and config.thinking_enabled:
        body["reasoning"] = {"max_tokens": config.thinking_budget}
    if fmt := _response_format(config):
        body["response_format"] = fmt
    if config.web_search:
        body["plugins"] = [{"id": "web"}]
    return body


def build_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "HTTP-Referer": OPENROUTER_REFERER,
        "X-Title": OPENROUTER_TITLE,
    }


__all__ = ["build_body", "build_headers"]
