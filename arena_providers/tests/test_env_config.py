"""Endpoint configuration merge order and timeout configuration."""

from __future__ import annotations

import json

import httpx
import pytest

from arena_providers.base import timeouts
from arena_providers.base.http import build_async_client
from arena_providers.config import get_endpoints, load_config_file
from arena_providers.config.defaults import DEFAULT_ENDPOINTS


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for family in DEFAULT_ENDPOINTS:
        monkeypatch.delenv(f"ARENA_{family.upper()}_ENDPOINT", raising=False)
    monkeypatch.delenv("ARENA_CONFIG_FILE", raising=False)


def test_defaults_cover_every_family():
    assert set(get_endpoints()) == {"responses", "messages", "chat_completions", "generate_content"}  # nosec B101


def test_env_override_then_file_override(monkeypatch, tmp_path):
    monkeypatch.setenv("ARENA_CHAT_COMPLETIONS_ENDPOINT", "http://env.local/v1/chat/completions")
    monkeypatch.setenv("ARENA_MESSAGES_ENDPOINT", "http://env.local/v1/messages")
    cfg = tmp_path / "arena.yaml"
    cfg.write_text("endpoints:\n  messages: http://file.local/v1/messages\n", encoding="utf-8")
    monkeypatch.setenv("ARENA_CONFIG_FILE", str(cfg))
    endpoints = get_endpoints()
    assert endpoints["chat_completions"] == "http://env.local/v1/chat/completions"  # nosec B101
    assert endpoints["messages"] == "http://file.local/v1/messages"  # nosec B101
    assert endpoints["responses"] == DEFAULT_ENDPOINTS["responses"]  # nosec B101


def test_load_config_file_json_and_missing(tmp_path):
    cfg = tmp_path / "arena.json"
    cfg.write_text(json.dumps({"endpoints": {"responses": "http://x"}}), encoding="utf-8")
    assert load_config_file(str(cfg))["endpoints"]["responses"] == "http://x"  # nosec B101
    assert load_config_file(str(tmp_path / "absent.json")) == {}  # nosec B101


def test_load_config_file_rejects_garbage(tmp_path):
    cfg = tmp_path / "bad.yaml"
    cfg.write_text("endpoints: [unclosed\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config_file(str(cfg))


def test_timeout_env_maps_to_httpx_timeout(monkeypatch):
    monkeypatch.setenv("ARENA_TIMEOUT_START_SECONDS", "5")
    monkeypatch.setenv("ARENA_TIMEOUT_STREAM_SECONDS", "12.5")
    t = timeouts.to_httpx_timeout()
    assert isinstance(t, httpx.Timeout)  # nosec B101
    assert t.connect == 5.0 and t.read == 12.5  # nosec B101


@pytest.mark.asyncio
async def test_build_async_client_applies_timeouts():
    cfg = timeouts.TimeoutConfig(start_timeout_seconds=1.0, stream_timeout_seconds=2.0)
    client = build_async_client(timeout_config=cfg)
    try:
        assert client.timeout.connect == 1.0 and client.timeout.read == 2.0  # nosec B101
    finally:
        await client.aclose()
