"""HTTP utilities package.

Exposes the async client builder used by the aggregation controller.
"""

from .client import build_async_client

__all__ = ["build_async_client"]
