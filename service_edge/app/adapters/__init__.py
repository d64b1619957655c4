"""
Adapters package for the Edge Service.

Contains HTTP client wrappers for the edge's upstreams (origin server and
backend API). These adapters encapsulate:

- Base URLs and request shapes
- Timeouts (one attempt per call, no retries)
- Error handling that maps to shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .api_client import APIProxyClient, ApiResponse
from .origin_client import OriginClient, OriginResponse

__all__ = [
    "APIProxyClient",
    "ApiResponse",
    "OriginClient",
    "OriginResponse",
]
