"""Pytest configuration for the arena test suite.

Fixtures:
- ``log_capture``: structured payloads emitted under the shared ``arena`` logger.
- ``fake_clock``: deterministic clock injected into runs and controllers.
- ``catalog``: small in-memory catalog covering every wire family.
- ``credentials``: static keys for every wire family.
- ``sse``: helper encoding JSON events as ``data:`` frames.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List

import pytest

from arena_providers.base.logging import BASE_LOGGER_NAME, get_logger
from arena_providers.base.models import Pricing, ProviderProfile, WireFamily
from arena_providers.base.repositories.keys import StaticCredentialStore


class _PayloadHandler(logging.Handler):
    """Collect decoded JSON payloads of structured log records."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.payloads: List[Dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            data = json.loads(record.getMessage())
        except ValueError:
            data = {"msg": record.getMessage()}
        data.setdefault("level", record.levelname)
        self.payloads.append(data)


@pytest.fixture()
def log_capture() -> Iterator[List[Dict[str, Any]]]:
    get_logger()
    base = logging.getLogger(BASE_LOGGER_NAME)
    handler = _PayloadHandler()
    base.addHandler(handler)
    try:
        yield handler.payloads
    finally:
        base.removeHandler(handler)


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self) -> None:
        self.t = 0.0

    def __call__(self) -> float:
        return self.t

    def advance(self, ms: float) -> None:
        self.t += ms / 1000.0


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def catalog() -> Dict[str, ProviderProfile]:
    profiles = [
        ProviderProfile(
            id="gpt-5",
            name="GPT-5",
            provider="openai",
            wire_family=WireFamily.RESPONSES,
            pricing=Pricing(1.25, 10.0),
            output_token_limit=128000,
            supports_reasoning_effort=True,
            supports_verbosity=True,
            category="reasoning",
        ),
        ProviderProfile(
            id="gpt-4.1",
            name="GPT-4.1",
            provider="openai",
            wire_family=WireFamily.RESPONSES,
            pricing=Pricing(2.0, 8.0),
            output_token_limit=32768,
        ),
        ProviderProfile(
            id="claude-sonnet-4-5",
            name="Claude 4.5 Sonnet",
            provider="anthropic",
            wire_family=WireFamily.MESSAGES,
            pricing=Pricing(3.0, 15.0),
            output_token_limit=64000,
            supports_thinking=True,
        ),
        ProviderProfile(
            id="meta-llama/llama-4-maverick",
            name="Llama 4 Maverick",
            provider="openrouter",
            wire_family=WireFamily.CHAT_COMPLETIONS,
            pricing=Pricing(0.15, 0.6),
            output_token_limit=16384,
            category="fast",
        ),
        ProviderProfile(
            id="openrouter/auto",
            name="Auto Router",
            provider="openrouter",
            wire_family=WireFamily.CHAT_COMPLETIONS,
            pricing=None,
            output_token_limit=8192,
        ),
        ProviderProfile(
            id="gemini-2.5-flash",
            name="Gemini 2.5 Flash",
            provider="gemini",
            wire_family=WireFamily.GENERATE_CONTENT,
            pricing=Pricing(0.3, 2.5),
            output_token_limit=65536,
            supports_thinking=True,
            category="fast",
        ),
    ]
    return {p.id: p for p in profiles}


@pytest.fixture()
def credentials() -> StaticCredentialStore:
    # Dummy values; allowlist for secret scanners.
    return StaticCredentialStore(
        {
            "responses": "sk-openai-dummy",  # pragma: allowlist secret
            "messages": "sk-ant-dummy",  # pragma: allowlist secret
            "chat_completions": "sk-or-dummy",  # pragma: allowlist secret
            "generate_content": "AIza-dummy",  # pragma: allowlist secret
        }
    )


def _sse(*events: Any, done: bool = False) -> bytes:
    lines = [f"data: {json.dumps(e) if not isinstance(e, str) else e}\n\n" for e in events]
    if done:
        lines.append("data: [DONE]\n\n")
    return "".join(lines).encode("utf-8")


@pytest.fixture()
def sse():
    return _sse
