"""
Unit tests for the edge upstream adapters.
"""

import json

import httpx
import pytest

from shared.errors import ApiUnreachableError, OriginUnreachableError
from service_edge.app.adapters.api_client import APIProxyClient
from service_edge.app.adapters.origin_client import OriginClient


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it saw."""

    def __init__(self, handler):
        self.requests = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


class TestOriginClient:
    """Test cases for OriginClient."""

    @pytest.mark.asyncio
    async def test_get_success(self):
        """2xx responses return body and content type."""
        transport = RecordingTransport(
            lambda request: httpx.Response(200, content=b"<h1>hi</h1>", headers={"Content-Type": "text/html"})
        )
        client = OriginClient("http://origin.test/", transport=transport)

        response = await client.get("/index.html")

        assert response.status_code == 200
        assert response.body == b"<h1>hi</h1>"
        assert response.content_type == "text/html"
        assert str(transport.requests[0].url) == "http://origin.test/index.html"

    @pytest.mark.asyncio
    async def test_get_keeps_query_string(self):
        """The cache key is appended to the base URL verbatim."""
        transport = RecordingTransport(lambda request: httpx.Response(200, content=b""))
        client = OriginClient("http://origin.test", transport=transport)

        await client.get("/app.js?v=2&lang=en")

        assert transport.requests[0].url.raw_path == b"/app.js?v=2&lang=en"

    @pytest.mark.asyncio
    async def test_get_without_content_type(self):
        """A missing content type is reported as None, not an error."""
        transport = RecordingTransport(lambda request: httpx.Response(200, content=b"raw"))
        client = OriginClient("http://origin.test", transport=transport)

        response = await client.get("/raw")

        assert response.content_type is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [301, 404, 500, 503])
    async def test_non_2xx_raises(self, status_code):
        """Any non-2xx status is an origin failure."""
        transport = RecordingTransport(lambda request: httpx.Response(status_code))
        client = OriginClient("http://origin.test", transport=transport)

        with pytest.raises(OriginUnreachableError) as exc_info:
            await client.get("/missing.html")

        assert exc_info.value.reason == f"Origin server returned {status_code}"
        assert exc_info.value.details["status_code"] == status_code
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        """Connection failures are origin failures, tried once."""
        def _fail(request):
            raise httpx.ConnectError("Connection refused", request=request)

        transport = RecordingTransport(_fail)
        client = OriginClient("http://origin.test", transport=transport)

        with pytest.raises(OriginUnreachableError) as exc_info:
            await client.get("/index.html")

        assert "Connection refused" in exc_info.value.reason
        assert exc_info.value.code == "ORIGIN_UNREACHABLE"
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        """Timeouts are origin failures."""
        def _timeout(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = OriginClient("http://origin.test", timeout=0.5, transport=httpx.MockTransport(_timeout))

        with pytest.raises(OriginUnreachableError):
            await client.get("/slow.html")


class TestAPIProxyClient:
    """Test cases for APIProxyClient."""

    @pytest.mark.asyncio
    async def test_forward_get(self):
        """GET requests are relayed without a body."""
        movies = [{"id": 1, "title": "Inception"}]
        transport = RecordingTransport(lambda request: httpx.Response(200, json=movies))
        client = APIProxyClient("http://api.test", transport=transport)

        response = await client.forward("GET", "/api/movies?page=1")

        sent = transport.requests[0]
        assert sent.method == "GET"
        assert sent.url.raw_path == b"/api/movies?page=1"
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.content == b""
        assert response.status_code == 200
        assert json.loads(response.body) == movies
        assert response.content_type == "application/json"

    @pytest.mark.asyncio
    async def test_forward_post_passes_body_through(self):
        """Non-GET bodies are relayed byte for byte."""
        transport = RecordingTransport(lambda request: httpx.Response(201, json={"ok": True}))
        client = APIProxyClient("http://api.test", transport=transport)
        body = b'{"seats": 2}'

        response = await client.forward("POST", "/api/movies/1/book", body=body, content_type="application/json")

        sent = transport.requests[0]
        assert sent.method == "POST"
        assert sent.content == body
        assert response.status_code == 201
        assert json.loads(response.body) == {"ok": True}

    @pytest.mark.asyncio
    async def test_forward_sends_only_content_type(self):
        """The caller's content type is kept; nothing else is forwarded."""
        transport = RecordingTransport(lambda request: httpx.Response(200, json={}))
        client = APIProxyClient("http://api.test", transport=transport)

        await client.forward("PUT", "/api/x", body=b"a=1", content_type="application/x-www-form-urlencoded")

        sent = transport.requests[0]
        assert sent.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert "authorization" not in sent.headers

    @pytest.mark.asyncio
    async def test_forward_non_2xx_raises(self):
        """Non-2xx answers are API failures."""
        transport = RecordingTransport(lambda request: httpx.Response(404, json={"error": "Movie not found"}))
        client = APIProxyClient("http://api.test", transport=transport)

        with pytest.raises(ApiUnreachableError) as exc_info:
            await client.forward("GET", "/api/movies/99")

        assert exc_info.value.details["status_code"] == 404
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_forward_transport_error_raises(self):
        """Network failures are API failures, tried once."""
        def _fail(request):
            raise httpx.ConnectError("Connection refused", request=request)

        transport = RecordingTransport(_fail)
        client = APIProxyClient("http://api.test", transport=transport)

        with pytest.raises(ApiUnreachableError) as exc_info:
            await client.forward("GET", "/api/movies")

        assert exc_info.value.code == "API_UNREACHABLE"
        assert len(transport.requests) == 1
