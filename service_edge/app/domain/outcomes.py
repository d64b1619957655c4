"""
Typed edge response outcomes.

Every request handled by the router ends in exactly one of these
variants. Each variant knows the header set it must carry, so the
HIT/MISS/BYPASS vocabulary lives in one place.
"""

import html
from dataclasses import dataclass
from typing import Dict, Optional, Union

from fastapi import Response
from fastapi.responses import JSONResponse

from ..caching.store import CacheEntry


CACHE_CONTROL = "public, max-age=31536000"
SERVED_FROM_EDGE = "CDN Edge Server"
SERVED_FROM_ORIGIN = "Origin Server (via CDN)"
BYPASS_REASON = "Dynamic API request"
API_UNAVAILABLE_MESSAGE = "Bad Gateway - API server unavailable"

ORIGIN_ERROR_TEMPLATE = """
<html>
  <body style="font-family: system-ui; padding: 2rem; background: #0b0c10; color: #f5f5f5;">
    <h1>502 Bad Gateway</h1>
    <p>CDN Edge Server could not reach the origin server.</p>
    <p>Error: {reason}</p>
    <p><a href="/" style="color: #66d9ef;">Try again</a></p>
  </body>
</html>
"""


def _content_headers(content_type: Optional[str]) -> Dict[str, str]:
    # Set explicitly so Starlette does not append a charset to the origin's value
    return {"Content-Type": content_type} if content_type else {}


@dataclass(frozen=True)
class CacheHit:
    """Served from a live cache entry."""

    key: str
    body: bytes
    content_type: str
    validator: str
    status_code: int = 200

    @classmethod
    def from_entry(cls, entry: CacheEntry) -> "CacheHit":
        return cls(
            key=entry.key,
            body=entry.body,
            content_type=entry.content_type,
            validator=entry.validator,
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {
            **_content_headers(self.content_type),
            "ETag": self.validator,
            "Cache-Control": CACHE_CONTROL,
            "X-Cache": "HIT",
            "X-Cache-Key": self.key,
            "X-Served-From": SERVED_FROM_EDGE,
        }

    def to_response(self) -> Response:
        return Response(content=self.body, status_code=self.status_code, headers=self.headers)


@dataclass(frozen=True)
class CacheMiss:
    """Fetched from the origin; may or may not have been stored."""

    key: str
    body: bytes
    content_type: Optional[str]
    validator: str
    stored: bool
    status_code: int = 200

    @property
    def headers(self) -> Dict[str, str]:
        return {
            **_content_headers(self.content_type),
            "ETag": self.validator,
            "Cache-Control": CACHE_CONTROL,
            "X-Cache": "MISS",
            "X-Cache-Key": self.key,
            "X-Served-From": SERVED_FROM_ORIGIN,
        }

    def to_response(self) -> Response:
        return Response(content=self.body, status_code=self.status_code, headers=self.headers)


@dataclass(frozen=True)
class Bypass:
    """Dynamic request relayed to the backend API."""

    key: str
    body: bytes
    content_type: str
    status_code: int = 200

    @property
    def headers(self) -> Dict[str, str]:
        return {
            **_content_headers(self.content_type),
            "X-Cache": "BYPASS",
            "X-Cache-Reason": BYPASS_REASON,
        }

    def to_response(self) -> Response:
        return Response(content=self.body, status_code=self.status_code, headers=self.headers)


@dataclass(frozen=True)
class GatewayError:
    """An upstream could not serve the request."""

    key: str
    upstream: str
    reason: str
    body: bytes
    content_type: str
    status_code: int = 502

    @classmethod
    def origin_unreachable(cls, key: str, reason: str) -> "GatewayError":
        body = ORIGIN_ERROR_TEMPLATE.format(reason=html.escape(reason))
        return cls(
            key=key,
            upstream="origin",
            reason=reason,
            body=body.encode("utf-8"),
            content_type="text/html; charset=utf-8",
        )

    @classmethod
    def api_unreachable(cls, key: str, reason: str) -> "GatewayError":
        rendered = JSONResponse(content={"error": API_UNAVAILABLE_MESSAGE})
        return cls(
            key=key,
            upstream="api",
            reason=reason,
            body=bytes(rendered.body),
            content_type=rendered.media_type,
        )

    @property
    def headers(self) -> Dict[str, str]:
        return _content_headers(self.content_type)

    def to_response(self) -> Response:
        return Response(content=self.body, status_code=self.status_code, headers=self.headers)


EdgeOutcome = Union[CacheHit, CacheMiss, Bypass, GatewayError]
