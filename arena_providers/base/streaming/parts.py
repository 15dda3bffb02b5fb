"""Structured content part rendering.

Some upstreams stream rich parts (generated code, code execution results,
inline images) next to plain text. Each part is replaced by a deterministic
Markdown substitution so nothing is silently dropped:

- ``text``: kept verbatim
- ``executableCode``: fenced code block tagged with the lowercased language
- ``codeExecutionResult``: ``**Execution result (<outcome>)**`` + fenced output
- ``inlineData``: ``![generated image](data:<mime>;base64,<data>)``

Parts flagged ``thought: true`` carry hidden reasoning and are skipped.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

DEFAULT_IMAGE_ALT = "generated image"


def render_code(language: Optional[str], code: str) -> str:
    lang = (language or "").lower()
    if lang == "language_unspecified":
        lang = ""
    return f"\n```{lang}\n{code.rstrip()}\n```\n"


def render_execution_result(outcome: Optional[str], output: Optional[str]) -> str:
    label = outcome or "OUTCOME_UNSPECIFIED"
    body = (output or "").rstrip()
    return f"\n**Execution result ({label})**\n```output\n{body}\n```\n"


def render_inline_data(mime_type: Optional[str], data: str, alt: str = DEFAULT_IMAGE_ALT) -> str:
    mime = mime_type or "application/octet-stream"
    return f"\n![{alt}](data:{mime};base64,{data})\n"


def render_part(part: Mapping[str, Any]) -> str:
    """Render one part; unknown part kinds render as an empty string."""
    if part.get("thought"):
        return ""
    text = part.get("text")
    if isinstance(text, str):
        return text
    code = part.get("executableCode")
    if isinstance(code, Mapping):
        return render_code(code.get("language"), str(code.get("code") or ""))
    result = part.get("codeExecutionResult")
    if isinstance(result, Mapping):
        return render_execution_result(result.get("outcome"), result.get("output"))
    inline = part.get("inlineData")
    if isinstance(inline, Mapping) and inline.get("data"):
        return render_inline_data(inline.get("mimeType"), str(inline["data"]))
    return ""


def render_parts(parts: Iterable[Mapping[str, Any]]) -> str:
    """Render a sequence of parts in order and concatenate the results."""
    return "".join(render_part(p) for p in parts if isinstance(p, Mapping))


__all__ = [
    "render_parts",
    "render_part",
    "render_code",
    "render_execution_result",
    "render_inline_data",
]
