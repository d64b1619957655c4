"""
Request router for the Edge.
"""

import asyncio
from contextlib import nullcontext
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

from fastapi import Request

from shared.errors import ApiUnreachableError, OriginUnreachableError
from shared.logging import get_logger
from ..adapters.api_client import APIProxyClient
from ..adapters.origin_client import OriginClient
from ..caching.policy import DEFAULT_API_PREFIX
from ..caching.service import CacheService
from .outcomes import Bypass, CacheHit, CacheMiss, EdgeOutcome, GatewayError

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


BODYLESS_METHODS = ("GET", "HEAD")


@dataclass(frozen=True)
class EdgeRequest:
    """The parts of an inbound request the edge cares about."""

    method: str
    key: str
    body: bytes = b""
    content_type: Optional[str] = None

    @classmethod
    async def from_request(cls, request: Request) -> "EdgeRequest":
        """Build the cache key from the raw path and raw query string."""
        raw_path = request.scope.get("raw_path") or request.url.path.encode("utf-8")
        # Some servers leave the query string on raw_path
        key = raw_path.split(b"?", 1)[0].decode("latin-1") or "/"
        query_string = request.scope.get("query_string", b"")
        if query_string:
            key = f"{key}?{query_string.decode('latin-1')}"

        body = b""
        if request.method.upper() not in BODYLESS_METHODS:
            body = await request.body()

        return cls(
            method=request.method.upper(),
            key=key,
            body=body,
            content_type=request.headers.get("content-type"),
        )


class RequestRouter:
    """Classifies requests and runs the cache or proxy protocol."""

    def __init__(
        self,
        cache_service: CacheService,
        origin_client: OriginClient,
        api_client: APIProxyClient,
        *,
        api_prefix: str = DEFAULT_API_PREFIX,
        metrics: Optional["MetricsCollector"] = None,
    ):
        self.cache = cache_service
        self.origin_client = origin_client
        self.api_client = api_client
        self.api_prefix = api_prefix
        self.metrics = metrics
        self.logger = get_logger("edge.router")

    def is_dynamic(self, key: str) -> bool:
        return key.startswith(self.api_prefix)

    async def handle(self, request: EdgeRequest) -> EdgeOutcome:
        """Handle one inbound request. Counts it exactly once."""
        self.cache.record_request()

        if self.is_dynamic(request.key):
            return await self._proxy_api(request)
        return await self._serve_asset(request.key)

    async def _proxy_api(self, request: EdgeRequest) -> EdgeOutcome:
        self.cache.record_bypass()
        try:
            with self._timed("api"):
                response = await self.api_client.forward(
                    request.method,
                    request.key,
                    body=request.body,
                    content_type=request.content_type,
                )
        except ApiUnreachableError as exc:
            self._record_upstream_error("api")
            return GatewayError.api_unreachable(request.key, exc.reason)

        return Bypass(
            key=request.key,
            body=response.body,
            content_type=response.content_type,
            status_code=response.status_code,
        )

    async def _serve_asset(self, key: str) -> EdgeOutcome:
        entry = self.cache.lookup(key)
        if entry is not None:
            return CacheHit.from_entry(entry)

        # A started miss runs to completion even if the client goes away
        return await asyncio.shield(self._fetch_and_populate(key))

    async def _fetch_and_populate(self, key: str) -> EdgeOutcome:
        self.logger.info("Fetching from origin", key=key)
        try:
            with self._timed("origin"):
                origin = await self.origin_client.get(key)
        except OriginUnreachableError as exc:
            self._record_upstream_error("origin")
            return GatewayError.origin_unreachable(key, exc.reason)

        validator, entry = self.cache.populate(key, origin.body, origin.content_type)
        return CacheMiss(
            key=key,
            body=origin.body,
            content_type=origin.content_type,
            validator=validator,
            stored=entry is not None,
        )

    def _timed(self, upstream: str):
        if self.metrics is None:
            return nullcontext()
        return self.metrics.time_operation("edge_upstream_duration_seconds", upstream=upstream)

    def _record_upstream_error(self, upstream: str) -> None:
        if self.metrics:
            self.metrics.increment_counter("edge_upstream_errors_total", upstream=upstream)
