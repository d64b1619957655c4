"""
Edge caching package.

Provides the cache primitives used by the edge: an in-memory store with
lazy TTL expiration, the content-type cacheability policy, cumulative
stats, and the CacheService that ties them together.
"""

from .policy import CACHEABLE_CONTENT_TYPES, is_cacheable
from .service import CacheService, format_iso, generate_validator
from .stats import StatsCollector, StatsSnapshot
from .store import CacheEntry, CacheStore

__all__ = [
    "CACHEABLE_CONTENT_TYPES",
    "CacheEntry",
    "CacheService",
    "CacheStore",
    "StatsCollector",
    "StatsSnapshot",
    "format_iso",
    "generate_validator",
    "is_cacheable",
]
