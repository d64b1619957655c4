"""
Backend API proxy client for the Edge.
"""

from dataclasses import dataclass
from typing import Optional

import httpx

from shared.logging import get_logger
from shared.errors import ApiUnreachableError


DEFAULT_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class ApiResponse:
    """Successful API answer, relayed to the client as-is."""

    status_code: int
    body: bytes
    content_type: str


class APIProxyClient:
    """Forwards dynamic requests to the backend API without caching."""

    def __init__(
        self,
        api_server_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = api_server_url.rstrip('/')
        self.timeout = timeout
        self.transport = transport
        self.logger = get_logger("edge.api_client")

    async def forward(
        self,
        method: str,
        path: str,
        body: bytes = b"",
        content_type: Optional[str] = None,
    ) -> ApiResponse:
        """Relay one request. Only Content-Type is forwarded as a header."""
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": content_type or DEFAULT_CONTENT_TYPE}
        content = body if method.upper() not in ("GET", "HEAD") else None

        self.logger.info("Proxying API request", method=method, url=url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as exc:
            reason = str(exc) or exc.__class__.__name__
            self.logger.error("API proxy error", method=method, url=url, error=reason)
            raise ApiUnreachableError(reason, details={"url": url})

        if not response.is_success:
            self.logger.error(
                "API returned error status",
                method=method,
                url=url,
                status_code=response.status_code,
                response=response.text
            )
            raise ApiUnreachableError(
                f"API server returned {response.status_code}",
                details={"url": url, "status_code": response.status_code}
            )

        return ApiResponse(
            status_code=response.status_code,
            body=response.content,
            content_type=response.headers.get("content-type", DEFAULT_CONTENT_TYPE),
        )
