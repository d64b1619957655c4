"""
Unit tests for the edge CacheService.
"""

import hashlib
import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from shared.metrics import MetricsCollector
from service_edge.app.caching.service import CacheService, format_iso, generate_validator


START = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)


class TestHelpers:
    """Test cases for module helpers."""

    def test_validator_is_md5_of_body(self):
        """Validator is the MD5 hex digest of the body."""
        body = b"<h1>hi</h1>"

        assert generate_validator(body) == hashlib.md5(body).hexdigest()

    def test_validator_is_stable(self):
        """Identical bodies produce identical validators."""
        assert generate_validator(b"abc") == generate_validator(b"abc")
        assert generate_validator(b"abc") != generate_validator(b"abd")

    def test_format_iso(self):
        """UTC with millisecond precision and a Z suffix."""
        assert format_iso(START) == "2024-01-01T12:00:00.000Z"
        assert format_iso(datetime(2024, 1, 1, 12, 0, 0)) == "2024-01-01T12:00:00.000Z"

    def test_format_iso_converts_offsets(self):
        """Offset-aware datetimes are converted to UTC."""
        value = datetime(2024, 1, 1, 14, 0, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_iso(value) == "2024-01-01T12:00:00.000Z"


class TestCacheService:
    """Test cases for CacheService."""

    @pytest.fixture
    def clock(self):
        """Create a fake clock."""
        return FakeClock()

    @pytest.fixture
    def cache(self, clock):
        """Create a CacheService with a one hour TTL."""
        return CacheService(3600, clock=clock)

    def test_cold_lookup_is_a_miss(self, cache):
        """Nothing cached means a miss."""
        assert cache.lookup("/index.html") is None

        snapshot = cache.stats.snapshot()
        assert snapshot.misses == 1
        assert snapshot.hits == 0

    def test_populate_stores_cacheable_response(self, cache):
        """Cacheable responses are stored with cachedAt + TTL."""
        validator, entry = cache.populate("/index.html", b"<h1>hi</h1>", "text/html")

        assert entry is not None
        assert validator == hashlib.md5(b"<h1>hi</h1>").hexdigest()
        assert entry.validator == validator
        assert entry.cached_at == START
        assert entry.expires_at == START + timedelta(hours=1)
        assert cache.store.get("/index.html") is entry

    def test_populate_skips_non_cacheable_response(self, cache):
        """Non-cacheable responses still get a validator but are not stored."""
        validator, entry = cache.populate("/data.bin", b"\x00\x01", "application/octet-stream")

        assert entry is None
        assert validator == hashlib.md5(b"\x00\x01").hexdigest()
        assert len(cache.store) == 0

    def test_populate_without_content_type(self, cache):
        """Missing content type is not an error, just not cached."""
        _, entry = cache.populate("/mystery", b"??", None)

        assert entry is None
        assert len(cache.store) == 0

    def test_populate_never_stores_api_paths(self, cache):
        """API keys are refused even with an allowed content type."""
        _, entry = cache.populate("/api/movies", b"<p>", "text/html")

        assert entry is None

    def test_lookup_within_ttl_is_a_hit(self, cache, clock):
        """A live entry is returned and counted as a hit."""
        cache.populate("/index.html", b"<h1>hi</h1>", "text/html")
        clock.advance(3599)

        entry = cache.lookup("/index.html")

        assert entry is not None
        assert entry.body == b"<h1>hi</h1>"
        assert cache.stats.snapshot().hits == 1

    def test_lookup_after_ttl_is_a_miss(self, cache, clock):
        """Expired entries are treated exactly like absent ones."""
        cache.populate("/index.html", b"<h1>hi</h1>", "text/html")
        clock.advance(3600)

        assert cache.lookup("/index.html") is None
        assert cache.stats.snapshot().misses == 1
        # Lazy expiration: still physically present
        assert "/index.html" in cache.store

    def test_forced_expiry_then_refresh_overwrites(self, cache, clock):
        """An entry forced into the past is replaced on the next populate."""
        _, original = cache.populate("/index.html", b"v1", "text/html")
        expired = dataclasses.replace(original, expires_at=START - timedelta(seconds=1))
        cache.store.put(expired)

        assert cache.lookup("/index.html") is None

        clock.advance(10)
        _, refreshed = cache.populate("/index.html", b"v2", "text/html")

        assert cache.store.get("/index.html") is refreshed
        assert refreshed.body == b"v2"
        assert refreshed.cached_at == START + timedelta(seconds=10)
        assert len(cache.store) == 1

    def test_zero_ttl_never_hits(self, clock):
        """With a zero TTL every lookup misses."""
        cache = CacheService(0, clock=clock)
        cache.populate("/index.html", b"x", "text/html")

        assert cache.lookup("/index.html") is None

    def test_get_stats_empty(self, cache):
        """Stats before any traffic."""
        assert cache.get_stats() == {
            "requests": 0,
            "hits": 0,
            "misses": 0,
            "bypasses": 0,
            "cachedItems": 0,
            "hitRate": "0.00%",
            "entries": [],
        }

    def test_get_stats_lists_entries(self, cache):
        """Entries are listed with size, type and ISO timestamps."""
        cache.record_request()
        cache.lookup("/index.html")
        cache.populate("/index.html", b"<h1>hi</h1>", "text/html")
        cache.record_request()
        cache.lookup("/index.html")

        stats = cache.get_stats()

        assert stats["requests"] == 2
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["cachedItems"] == 1
        assert stats["hitRate"] == "50.00%"
        assert stats["entries"] == [
            {
                "url": "/index.html",
                "size": 11,
                "contentType": "text/html",
                "cachedAt": "2024-01-01T12:00:00.000Z",
                "expiresAt": "2024-01-01T13:00:00.000Z",
            }
        ]

    def test_purge_clears_entries_but_not_counters(self, cache):
        """Purge empties the store and leaves the counters alone."""
        cache.record_request()
        cache.lookup("/a.css")
        cache.populate("/a.css", b"body{}", "text/css")
        cache.populate("/b.css", b"p{}", "text/css")
        before = cache.get_stats()

        cleared = cache.purge()
        after = cache.get_stats()

        assert cleared == 2
        assert after["cachedItems"] == 0
        assert after["entries"] == []
        for counter in ("requests", "hits", "misses", "bypasses", "hitRate"):
            assert after[counter] == before[counter]

    def test_bypass_is_counted(self, cache):
        """Bypasses are tracked separately from hits and misses."""
        cache.record_request()
        cache.record_bypass()

        stats = cache.get_stats()
        assert stats["bypasses"] == 1
        assert stats["hits"] == 0
        assert stats["misses"] == 0

    def test_metrics_are_updated(self, clock):
        """Lookups, entries and purges feed the metrics collector."""
        metrics = MetricsCollector("edge")
        cache = CacheService(3600, clock=clock, metrics=metrics)

        cache.lookup("/index.html")
        cache.populate("/index.html", b"x", "text/html")
        cache.lookup("/index.html")

        registry = metrics.registry
        assert registry.get_sample_value("edge_cache_lookups_total", {"result": "miss"}) == 1.0
        assert registry.get_sample_value("edge_cache_lookups_total", {"result": "hit"}) == 1.0
        assert registry.get_sample_value("edge_cache_entries") == 1.0

        cache.purge()

        assert registry.get_sample_value("edge_cache_entries") == 0.0
        assert registry.get_sample_value("edge_cache_purges_total") == 1.0
