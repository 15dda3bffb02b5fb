"""
Arena Base Package

Exports the provider-agnostic building blocks of the aggregation engine for
use by the provider packages and the service layer.

- Models: wire families, pricing, profiles, run configuration and run state
- Errors: normalized taxonomy and exception classification
- Request building: family dispatch to per-provider body/header builders
- Streaming: framing, envelope handling, deltas and frame interpretation
- Repositories: credential stores
- Timeouts & Cancellation
"""

from .cancellation import CancellationToken, CancelledError
from .cost import compute_cost, format_cost
from .errors import (
    ErrorCode,
    FrameDecodeError,
    ProviderError,
    TransportError,
    UsageParseError,
    ValidationError,
    classify_exception,
)
from .factory import UnknownWireFamilyError, get_interpreter, supported
from .interfaces import CredentialStore, StateListener
from .models import (
    ModelRunState,
    Pricing,
    ProviderProfile,
    RunConfig,
    RunStatus,
    WireFamily,
)
from .repositories.keys import (
    ChainedCredentialStore,
    EnvCredentialStore,
    KeyResolution,
    StaticCredentialStore,
)
from .request_build import PreparedRequest, build_request
from .streaming import (
    FrameReader,
    Ignorable,
    StreamError,
    Terminal,
    TextDelta,
    UsageSnapshot,
    interpret_frame,
)
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Models
    "WireFamily",
    "Pricing",
    "ProviderProfile",
    "RunConfig",
    "ModelRunState",
    "RunStatus",
    # Errors
    "ErrorCode",
    "ProviderError",
    "ValidationError",
    "TransportError",
    "FrameDecodeError",
    "UsageParseError",
    "classify_exception",
    # Cost
    "compute_cost",
    "format_cost",
    # Interfaces
    "CredentialStore",
    "StateListener",
    # Repositories
    "KeyResolution",
    "EnvCredentialStore",
    "StaticCredentialStore",
    "ChainedCredentialStore",
    # Request building & dispatch
    "PreparedRequest",
    "build_request",
    "UnknownWireFamilyError",
    "get_interpreter",
    "supported",
    # Streaming
    "FrameReader",
    "TextDelta",
    "UsageSnapshot",
    "Terminal",
    "Ignorable",
    "StreamError",
    "interpret_frame",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
]
