"""
Origin server client for the Edge.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from shared.logging import get_logger
from shared.errors import OriginUnreachableError


@dataclass(frozen=True)
class OriginResponse:
    """Successful origin fetch."""

    status_code: int
    body: bytes
    content_type: Optional[str]


class OriginClient:
    """Fetches cache keys from the origin server.

    Each call is a single attempt bounded by ``timeout``; anything other
    than a 2xx answer is reported as OriginUnreachableError.
    """

    def __init__(
        self,
        origin_server_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = origin_server_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("edge.origin_client")

    async def get(self, key: str) -> OriginResponse:
        """Fetch ``key`` (path plus query string) from the origin."""
        url = f"{self.base_url}{key}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            reason = str(exc) or exc.__class__.__name__
            self.logger.error("Origin request failed", url=url, error=reason)
            raise OriginUnreachableError(reason, details={"url": url})

        if not response.is_success:
            self.logger.error("Origin returned error status", url=url, status_code=response.status_code)
            raise OriginUnreachableError(
                f"Origin server returned {response.status_code}",
                details={"url": url, "status_code": response.status_code}
            )

        self.logger.debug("Origin response received", url=url, status_code=response.status_code)
        return OriginResponse(
            status_code=response.status_code,
            body=response.content,
            content_type=response.headers.get("content-type"),
        )
