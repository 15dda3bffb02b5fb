"""Request construction for one model run.

Purpose
-------
Turn ``(profile, prompt, RunConfig)`` into a transport-ready
:class:`PreparedRequest`: endpoint URL, credential headers and JSON body. The
family-specific parts (body shape, header names) are resolved from the
wire-family registry; this module only assembles them.

No I/O happens here. The same function backs the real run loop and the
CLI dry-run plan.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .errors_parts.run_errors import ValidationError
from .factory import get_body_builder, get_header_builder
from .models_parts.provider_profile import ProviderProfile
from .models_parts.run_config import RunConfig

_REDACTED = "***"
_SECRET_HEADERS = ("authorization", "x-api-key", "x-goog-api-key")


@dataclass
class PreparedRequest:
    """A fully built POST request for one run."""

    url: str
    headers: Dict[str, str]
    body: Dict[str, Any] = field(default_factory=dict)

    def redacted_headers(self) -> Dict[str, str]:
        """Headers with credential values masked, for logs and dry runs."""
        return {
            k: (_REDACTED if k.lower() in _SECRET_HEADERS else v)
            for k, v in self.headers.items()
        }


def build_messages(prompt: str, system_prompt: Optional[str] = None) -> List[Dict[str, str]]:
    """Return the role/content message list shared by chat-style families."""
    messages: List[Dict[str, str]] = []
    if system_prompt and system_prompt.strip():
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages


def resolve_endpoint(profile: ProviderProfile, endpoints: Mapping[str, str]) -> str:
    """Return the endpoint for the profile's family with ``{model}`` filled in."""
    template = endpoints.get(profile.wire_family.value)
    if not template:
        raise ValidationError(
            f"No endpoint configured for wire family '{profile.wire_family.value}'",
            provider=profile.provider,
            model=profile.id,
        )
    return template.replace("{model}", profile.id)


def build_body(
    profile: ProviderProfile,
    prompt: str,
    config: RunConfig,
    system_prompt: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the JSON body for ``profile``'s wire family."""
    return get_body_builder(profile.wire_family)(profile, prompt, config, system_prompt)


def build_request(
    profile: ProviderProfile,
    prompt: str,
    config: RunConfig,
    *,
    api_key: str,
    endpoints: Mapping[str, str],
    system_prompt: Optional[str] = None,
) -> PreparedRequest:
    """Assemble the complete request for one run."""
    headers = {"Content-Type": "application/json"}
    headers |= get_header_builder(profile.wire_family)(api_key)
    return PreparedRequest(
        url=resolve_endpoint(profile, endpoints),
        headers=headers,
        body=build_body(profile, prompt, config, system_prompt),
    )


__all__ = [
    "PreparedRequest",
    "build_messages",
    "build_body",
    "build_request",
    "resolve_endpoint",
]
