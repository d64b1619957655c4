"""
In-memory edge cache store.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class CacheEntry:
    """A cached origin response. Refreshing replaces the whole entry."""

    key: str
    body: bytes
    content_type: str
    validator: str
    cached_at: datetime
    expires_at: datetime

    @property
    def size(self) -> int:
        return len(self.body)

    def is_fresh(self, now: datetime) -> bool:
        """True while ``now`` is strictly before the expiry instant."""
        return now < self.expires_at


class CacheStore:
    """Unbounded key -> CacheEntry mapping.

    Nothing is evicted implicitly. Expired entries stay in place until a
    later MISS overwrites them or the whole store is cleared.
    """

    def __init__(self):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def put(self, entry: CacheEntry) -> None:
        with self._lock:
            self._entries[entry.key] = entry

    def clear(self) -> int:
        """Remove every entry and return how many were removed."""
        with self._lock:
            cleared = len(self._entries)
            self._entries.clear()
            return cleared

    def snapshot(self) -> List[CacheEntry]:
        """Entries in insertion order, copied under the lock."""
        with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries
