"""
Edge cache service: store, counters, TTL and clock behind one object.
"""

import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple, TYPE_CHECKING

from shared.logging import get_logger
from .policy import DEFAULT_API_PREFIX, is_cacheable
from .stats import StatsCollector
from .store import CacheEntry, CacheStore

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_TTL_SECONDS = 3600


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def generate_validator(body: bytes) -> str:
    """Content-derived validator emitted as the ETag."""
    return hashlib.md5(body).hexdigest()


def format_iso(value: datetime) -> str:
    """Format datetime values as ISO-8601 strings with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CacheService:
    """Owns the edge cache state for the lifetime of the process.

    Built once at startup and handed to the request router. Every
    mutation goes through the store and stats locks, so handlers running
    concurrently never observe a half-applied purge or put.
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        *,
        api_prefix: str = DEFAULT_API_PREFIX,
        clock: Callable[[], datetime] = utc_now,
        store: Optional[CacheStore] = None,
        stats: Optional[StatsCollector] = None,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.ttl = timedelta(seconds=ttl_seconds)
        self.api_prefix = api_prefix
        self.clock = clock
        self.store = store if store is not None else CacheStore()
        self.stats = stats if stats is not None else StatsCollector()
        self.metrics = metrics
        self.logger = get_logger("edge.cache_service")

    def record_request(self) -> None:
        self.stats.record_request()

    def record_bypass(self) -> None:
        self.stats.record_bypass()
        self._count_lookup("bypass")

    def lookup(self, key: str) -> Optional[CacheEntry]:
        """Return a live entry for ``key`` and count the hit or miss.

        Absent and expired entries are both misses. Expired entries are
        left in the store for the following populate to overwrite.
        """
        entry = self.store.get(key)
        if entry is not None and entry.is_fresh(self.clock()):
            self.stats.record_hit()
            self._count_lookup("hit")
            self.logger.info("Cache hit", key=key)
            return entry

        self.stats.record_miss()
        self._count_lookup("miss")
        self.logger.info("Cache miss", key=key, expired=entry is not None)
        return None

    def populate(self, key: str, body: bytes, content_type: Optional[str]) -> Tuple[str, Optional[CacheEntry]]:
        """Compute the validator for an origin body and store it if allowed.

        Returns the validator and the stored entry, or ``None`` when the
        response is not cacheable.
        """
        validator = generate_validator(body)
        if not is_cacheable(key, content_type, self.api_prefix):
            self.logger.info("Response not cacheable", key=key, content_type=content_type)
            return validator, None

        cached_at = self.clock()
        entry = CacheEntry(
            key=key,
            body=body,
            content_type=content_type,
            validator=validator,
            cached_at=cached_at,
            expires_at=cached_at + self.ttl,
        )
        self.store.put(entry)
        self._update_size_gauge()
        self.logger.info(
            "Cached response",
            key=key,
            size=entry.size,
            ttl_seconds=int(self.ttl.total_seconds()),
        )
        return validator, entry

    def purge(self) -> int:
        """Drop every entry. Counters are left as they are."""
        cleared = self.store.clear()
        self._update_size_gauge()
        if self.metrics:
            self.metrics.increment_counter("edge_cache_purges_total")
        self.logger.info("Cache purged", cleared=cleared)
        return cleared

    def get_stats(self) -> Dict[str, Any]:
        counters = self.stats.snapshot()
        entries = self.store.snapshot()
        return {
            "requests": counters.requests,
            "hits": counters.hits,
            "misses": counters.misses,
            "bypasses": counters.bypasses,
            "cachedItems": len(entries),
            "hitRate": counters.hit_rate,
            "entries": [
                {
                    "url": entry.key,
                    "size": entry.size,
                    "contentType": entry.content_type,
                    "cachedAt": format_iso(entry.cached_at),
                    "expiresAt": format_iso(entry.expires_at),
                }
                for entry in entries
            ],
        }

    def _count_lookup(self, result: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("edge_cache_lookups_total", result=result)

    def _update_size_gauge(self) -> None:
        if self.metrics:
            self.metrics.set_gauge("edge_cache_entries", len(self.store))
