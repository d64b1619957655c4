"""
Domain helpers for the Edge Service.

- router: classifies requests (dynamic API vs cacheable asset) and runs
  the lookup / fetch-populate protocol.
- outcomes: the HIT / MISS / BYPASS / gateway-error result variants and
  the headers each one carries.
"""

from .outcomes import Bypass, CacheHit, CacheMiss, EdgeOutcome, GatewayError
from .router import EdgeRequest, RequestRouter

__all__ = [
    "Bypass",
    "CacheHit",
    "CacheMiss",
    "EdgeOutcome",
    "EdgeRequest",
    "GatewayError",
    "RequestRouter",
]
