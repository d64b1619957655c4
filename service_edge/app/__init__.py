"""
Edge Service package for the Edge Cache Layer.

The edge fronts client requests and either serves them from its cache,
fetches them from the origin, or proxies them to the backend API:
- Static assets: cached per path + query string with a fixed TTL
- Dynamic API calls: always bypass the cache
- Introspection and invalidation: /__cache-stats and /__cache-purge

Structure:
- app.main: FastAPI app, routes, and service wiring.
- app.adapters: HTTP clients for the origin server and backend API.
- app.caching: Cache store, cacheability policy, stats and cache service.
- app.domain: Request routing and typed response outcomes.
"""
