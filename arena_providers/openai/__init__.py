"""
OpenAI provider package (Responses API wire family).

Exports:
- build_body / build_headers: request construction
- interpret_event: stream event interpreter
"""

from .chat_helpers import build_body, build_headers
from .responses_stream import interpret_event

__all__ = ["build_body", "build_headers", "interpret_event"]
