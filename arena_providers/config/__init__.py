"""Configuration layer for the aggregation engine.

Endpoint resolution merges three sources, later wins:
    1. Built-in defaults (``config.defaults.DEFAULT_ENDPOINTS``)
    2. Environment variables ``ARENA_<FAMILY>_ENDPOINT``
       (e.g. ``ARENA_CHAT_COMPLETIONS_ENDPOINT``)
    3. Optional external file named by ``ARENA_CONFIG_FILE`` (JSON or YAML)
       with an ``endpoints`` mapping

External config file example::

    endpoints:
      chat_completions: http://localhost:8080/v1/chat/completions
      messages: https://proxy.internal/anthropic/v1/messages

Public API
----------
* get_endpoints() -> dict
* load_config_file() -> dict
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import DEFAULT_ENDPOINTS
from .env import is_placeholder

CONFIG_FILE_ENV = "ARENA_CONFIG_FILE"


def load_config_file(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the external config file (JSON first, then YAML).

    Missing files and non-mapping documents yield ``{}``. A file that is
    neither valid JSON nor valid YAML raises ``ValueError``.
    """
    path = path or os.getenv(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path).expanduser()
    if not p.is_file():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid config file {p}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def _env_overrides() -> Dict[str, str]:
    out: Dict[str, str] = {}
    for family in DEFAULT_ENDPOINTS:
        val = os.getenv(f"ARENA_{family.upper()}_ENDPOINT")
        if val and not is_placeholder(val):
            out[family] = val.strip()
    return out


def get_endpoints() -> Dict[str, str]:
    """Return the merged wire family -> endpoint URL mapping."""
    endpoints: Dict[str, str] = dict(DEFAULT_ENDPOINTS)
    endpoints |= _env_overrides()
    file_endpoints = load_config_file().get("endpoints")
    if isinstance(file_endpoints, dict):
        endpoints |= {str(k): str(v) for k, v in file_endpoints.items() if v}
    return endpoints


__all__ = [
    "CONFIG_FILE_ENV",
    "get_endpoints",
    "load_config_file",
]
