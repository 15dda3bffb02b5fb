"""arena_providers.config.defaults
===============================

Central place for the small, stable default values used by the aggregation
engine and its CLI. Everything here can be overridden through environment
variables or the external config file (see ``arena_providers.config``).

This module intentionally imports nothing from the rest of the package so
every layer may depend on it without cycles. Only plain constants live here.
"""

from __future__ import annotations

# ---- Wire-family endpoints ----
# Keys are wire-family values (see ``WireFamily``). The generate_content
# endpoint is a template; ``{model}`` is substituted per run.
OPENAI_RESPONSES_ENDPOINT = "https://api.openai.com/v1/responses"
ANTHROPIC_MESSAGES_ENDPOINT = "https://api.anthropic.com/v1/messages"
OPENROUTER_CHAT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
GEMINI_STREAM_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/{model}:streamGenerateContent?alt=sse"
)

DEFAULT_ENDPOINTS = {
    "responses": OPENAI_RESPONSES_ENDPOINT,
    "messages": ANTHROPIC_MESSAGES_ENDPOINT,
    "chat_completions": OPENROUTER_CHAT_ENDPOINT,
    "generate_content": GEMINI_STREAM_ENDPOINT,
}

# ---- Provider headers ----
ANTHROPIC_API_VERSION = "2023-06-01"
# OpenRouter attributes traffic to the calling app through these two headers.
OPENROUTER_REFERER = "https://github.com/arena-providers/arena-providers"
OPENROUTER_TITLE = "Arena Providers"

# ---- Run configuration defaults ----
DEFAULT_TEMPERATURE = 0.7
DEFAULT_OUTPUT_TOKEN_BUDGET = 1000
DEFAULT_REASONING_EFFORT = "medium"
DEFAULT_REASONING_SUMMARY = "auto"
DEFAULT_VERBOSITY = "medium"
DEFAULT_RESPONSE_FORMAT = "text"

# Per-model defaults applied by ``RunConfig.defaults_for``.
THINKING_DEFAULT_BUDGET = 2048
THINKING_MIN_OUTPUT_BUDGET = 8192
THINKING_TEMPERATURE = 1.0
REASONING_MIN_OUTPUT_BUDGET = 10000
# Budgets under this threshold are raised to the family minimum above.
SMALL_OUTPUT_BUDGET_THRESHOLD = 4096

# Appended when json_object output is requested but no prompt mentions JSON;
# the Responses API rejects json_object mode otherwise.
JSON_MODE_SYSTEM_HINT = "Please output valid JSON."

# ---- CLI defaults ----
CLI_PREVIEW_CHARS = 400


__all__ = [
    "OPENAI_RESPONSES_ENDPOINT",
    "ANTHROPIC_MESSAGES_ENDPOINT",
    "OPENROUTER_CHAT_ENDPOINT",
    "GEMINI_STREAM_ENDPOINT",
    "DEFAULT_ENDPOINTS",
    "ANTHROPIC_API_VERSION",
    "OPENROUTER_REFERER",
    "OPENROUTER_TITLE",
    "DEFAULT_TEMPERATURE",
    "DEFAULT_OUTPUT_TOKEN_BUDGET",
    "DEFAULT_REASONING_EFFORT",
    "DEFAULT_REASONING_SUMMARY",
    "DEFAULT_VERBOSITY",
    "DEFAULT_RESPONSE_FORMAT",
    "THINKING_DEFAULT_BUDGET",
    "THINKING_MIN_OUTPUT_BUDGET",
    "THINKING_TEMPERATURE",
    "REASONING_MIN_OUTPUT_BUDGET",
    "SMALL_OUTPUT_BUDGET_THRESHOLD",
    "JSON_MODE_SYSTEM_HINT",
    "CLI_PREVIEW_CHARS",
]
