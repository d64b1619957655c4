"""
Cumulative request counters for the edge cache.
"""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the counters."""

    requests: int
    hits: int
    misses: int
    bypasses: int

    @property
    def hit_ratio(self) -> float:
        if self.requests == 0:
            return 0.0
        return self.hits / self.requests

    @property
    def hit_rate(self) -> str:
        """Hit ratio as a percentage string, e.g. ``"66.67%"``."""
        return f"{self.hit_ratio * 100:.2f}%"


class StatsCollector:
    """Monotonic counters shared by all request handlers.

    Counters only ever grow; purging the cache does not reset them.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._requests = 0
        self._hits = 0
        self._misses = 0
        self._bypasses = 0

    def record_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1

    def record_bypass(self) -> None:
        with self._lock:
            self._bypasses += 1

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                requests=self._requests,
                hits=self._hits,
                misses=self._misses,
                bypasses=self._bypasses,
            )
