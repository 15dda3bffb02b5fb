"""OpenAI Responses API request helpers.

Purpose:
- Build the streaming ``/v1/responses`` body for one run.
- Build the bearer credential header.

Notes:
- Reasoning models receive ``reasoning.effort``/``reasoning.summary`` and no
  temperature; other models receive temperature. Exactly one is sent.
- ``json_object`` mode requires the word "json" in the input; a short system
  instruction is appended when no message mentions it.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.models_parts.provider_profile import ProviderProfile
from ..base.models_parts.run_config import RunConfig
from ..base.request_build import build_messages
from ..config.defaults import DEFAULT_REASONING_EFFORT, JSON_MODE_SYSTEM_HINT


def _mentions_json(messages: List[Dict[str, str]]) -> bool:
    return any("json" in m["content"].lower() for m in messages)


def _text_options(profile: ProviderProfile, config: RunConfig) -> Dict[str, Any]:
    text: Dict[str, Any] = {}
    if config.response_format == "json_object":
        text["format"] = {"type": "json_object"}
    elif config.response_format == "json_schema":
        text["format"] = {
            "type": "json_schema",
            "name": "response",
            "schema": config.json_schema,
        }
    if profile.supports_verbosity:
        text["verbosity"] = config.verbosity
    return text


def build_body(
    profile: ProviderProfile,
    prompt: str,
    config: RunConfig,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the Responses API body for a streaming run."""
    messages = build_messages(prompt, system_prompt)
    if config.response_format == "json_object" and not _mentions_json(messages):
        messages.append({"role": "system", "content": JSON_MODE_SYSTEM_HINT})

    body: Dict[str, Any] = {
        "model": profile.id,
        "input": messages,
        "stream": True,
        "store": config.store,
        "max_output_tokens": config.output_token_budget,
    }
    if config.include:
        body["include"] = list(config.include)
    if profile.supports_reasoning_effort:
        body["reasoning"] = {
            "effort": config.reasoning_effort or DEFAULT_REASONING_EFFORT,
            "summary": config.reasoning_summary,
        }
    else:
        body["temperature"] = config.temperature
    if text := _text_options(profile, config):
        body["text"] = text
    if config.web_search:
        tool = "web_search_preview" if profile.is_deep_research else "web_search"
        body["tools"] = [{"type": tool}]
    return body


def build_headers(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


__all__ = ["build_body", "build_headers"]
