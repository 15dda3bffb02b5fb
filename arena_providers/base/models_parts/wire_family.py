"""
Wire family enumeration.

A wire family names the request shape and streaming event vocabulary shared
by one group of upstream APIs. Interpreters and request builders are selected
by this value through lookup tables, never by scattered conditionals.
"""
from __future__ import annotations

from enum import Enum


class WireFamily(str, Enum):
    """Closed set of supported streaming protocols."""

    RESPONSES = "responses"
    MESSAGES = "messages"
    CHAT_COMPLETIONS = "chat_completions"
    GENERATE_CONTENT = "generate_content"

    @classmethod
    def parse(cls, value: "str | WireFamily") -> "WireFamily":
        """Accept enum members, values, or camelCase aliases (``chatCompletions``)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        normalized = "".join(f"_{c.lower()}" if c.isupper() else c for c in text).lstrip("_")
        normalized = normalized.replace("-", "_")
        return cls(normalized)


__all__ = ["WireFamily"]
