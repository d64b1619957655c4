"""
Edge caching service for the Edge Cache Layer.
"""

from datetime import datetime
from typing import Callable, Optional

import httpx
from fastapi import Request

from shared.base_service import BaseService
from shared.config import ServiceConfig
from .adapters import APIProxyClient, OriginClient
from .caching import CacheService
from .caching.service import utc_now
from .domain import EdgeRequest, RequestRouter


PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class EdgeService(BaseService):
    """Edge caching reverse proxy implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        origin_transport: Optional[httpx.AsyncBaseTransport] = None,
        api_transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__("edge", 9000, config)

        self.cache_service = CacheService(
            self.config.cache_ttl_seconds,
            api_prefix=self.config.api_prefix,
            clock=clock,
            metrics=self.metrics,
        )
        self.origin_client = OriginClient(
            self.config.origin_server_url,
            timeout=self.config.origin_timeout_seconds,
            transport=origin_transport,
        )
        self.api_client = APIProxyClient(
            self.config.api_server_url,
            timeout=self.config.api_timeout_seconds,
            transport=api_transport,
        )
        self.router = RequestRouter(
            self.cache_service,
            self.origin_client,
            self.api_client,
            api_prefix=self.config.api_prefix,
            metrics=self.metrics,
        )

        # Admin routes must be registered before the catch-all proxy route
        self._setup_admin_routes()
        self._setup_edge_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.edge_service = self

        self.logger.info(
            "Edge service configured",
            origin=self.config.origin_server_url,
            api=self.config.api_server_url,
            ttl_seconds=self.config.cache_ttl_seconds,
        )

    def _setup_admin_routes(self):
        """Set up cache introspection and invalidation routes."""

        @self.app.get("/__cache-stats")
        async def cache_stats():
            """Counters, hit rate and a listing of cached entries."""
            return self.cache_service.get_stats()

        @self.app.post("/__cache-purge")
        async def cache_purge():
            """Drop every cached entry."""
            cleared = self.cache_service.purge()
            return {"message": f"Cache purged successfully. {cleared} items cleared."}

    def _setup_edge_routes(self):
        """Set up the catch-all cache / proxy route."""

        @self.app.api_route("/{path:path}", methods=PROXY_METHODS, include_in_schema=False)
        async def edge(request: Request):
            edge_request = await EdgeRequest.from_request(request)
            outcome = await self.router.handle(edge_request)
            return outcome.to_response()


def create_app(config: Optional[ServiceConfig] = None):
    """Create FastAPI application."""
    service = EdgeService(config)
    return service.app


if __name__ == "__main__":
    service = EdgeService()
    service.run()
