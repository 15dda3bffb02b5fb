"""
OpenRouter provider package (chat-completions wire family).
"""

from .chat_helpers import build_body, build_headers
from .stream_helpers import interpret_event

__all__ = ["build_body", "build_headers", "interpret_event"]
