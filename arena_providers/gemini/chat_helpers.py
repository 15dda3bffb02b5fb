"""Gemini ``streamGenerateContent`` request helpers.

Purpose:
- Build the REST body (``contents``, ``systemInstruction``,
  ``generationConfig``, ``tools``) for one streaming run.
- Build the ``x-goog-api-key`` header.

Notes:
- Image-capable models (id contains ``image``) are asked for both image and
  text modalities so inline image parts are streamed back.
- Thinking models receive a ``thinkingConfig`` budget when thinking is on.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.models_parts.provider_profile import ProviderProfile
from ..base.models_parts.run_config import RunConfig


def _tools(config: RunConfig) -> List[Dict[str, Any]]:
    tools: List[Dict[str, Any]] = []
    if config.web_search:
        tools.append({"googleSearch": {}})
    if config.code_execution:
        tools.append({"codeExecution": {}})
    if config.url_context:
        tools.append({"urlContext": {}})
    return tools


def _generation_config(profile: ProviderProfile, config: RunConfig) -> Dict[str, Any]:
    gen: Dict[str, Any] = {
        "temperature": config.temperature,
        "maxOutputTokens": config.output_token_budget,
    }
    if "image" in profile.id:
        gen["responseModalities"] = ["IMAGE", "TEXT"]
    if profile.supports_thinking and config.thinking_enabled:
        gen["thinkingConfig"] = {"thinkingBudget": config.thinking_budget}
    if config.response_format in ("json_object", "json_schema"):
        gen["responseMimeType"] = "application/json"
        if config.json_schema:
            gen["responseSchema"] = config.json_schema
    return gen


def build_body(
    profile: ProviderProfile,
    prompt: str,
    config: RunConfig,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the generateContent body for a streaming run.

    The model id is part of the endpoint URL, not the body.
    """
    body: Dict[str, Any] = {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": _generation_config(profile, config),
    }
    if system_prompt and system_prompt.strip():
        body["systemInstruction"] = {"parts": [{"text": system_prompt}]}
    if tools := _tools(config):
        body["tools"] = tools
    return body


def build_headers(api_key: str) -> Dict[str, str]:
    return {"x-goog-api-key": api_key}


__all__ = ["build_body", "build_headers"]
