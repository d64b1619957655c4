"""
Mock origin server serving static files for the edge to fetch.
"""

import mimetypes
from pathlib import Path
from typing import Optional, Union

from fastapi import FastAPI, Response

from shared.config import DEFAULT_ORIGIN_PUBLIC_DIR
from shared.logging import get_logger


ORIGIN_CACHE_CONTROL = "public, max-age=31536000"

# Pinned so the answer does not depend on the host's mimetypes database
CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".txt": "text/plain; charset=utf-8",
}


def guess_content_type(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in CONTENT_TYPES:
        return CONTENT_TYPES[suffix]
    guessed, _ = mimetypes.guess_type(path.name)
    return guessed or "application/octet-stream"


class MockOriginServer:
    """Mock origin implementation backed by a directory of files."""

    def __init__(self, public_dir: Optional[Union[str, Path]] = None, port: int = 8080):
        self.port = port
        self.public_dir = Path(public_dir or DEFAULT_ORIGIN_PUBLIC_DIR).resolve()
        self.logger = get_logger("mock.origin")
        self.app = FastAPI(title="Mock Origin", version="1.0.0", docs_url=None, redoc_url=None, openapi_url=None)

        self._setup_routes()

    def resolve(self, path: str) -> Optional[Path]:
        """Map a URL path to a file under the public directory."""
        candidate = (self.public_dir / path.lstrip("/")).resolve()
        if candidate != self.public_dir and self.public_dir not in candidate.parents:
            return None
        if candidate.is_dir():
            candidate = candidate / "index.html"
        if not candidate.is_file():
            return None
        return candidate

    def _setup_routes(self):
        """Set up mock origin routes."""

        @self.app.get("/{path:path}")
        async def serve(path: str):
            """Serve a static file."""
            filepath = self.resolve(path)
            if filepath is None:
                self.logger.info("Not found", path=path)
                return Response(
                    content=f"Cannot GET /{path}",
                    status_code=404,
                    headers={"Content-Type": "text/html; charset=utf-8"},
                )

            self.logger.info("Serving", file=filepath.name)
            return Response(
                content=filepath.read_bytes(),
                headers={
                    "Content-Type": guess_content_type(filepath),
                    "Cache-Control": ORIGIN_CACHE_CONTROL,
                    "X-Served-By": "Origin Server",
                },
            )


def create_app(public_dir: Optional[Union[str, Path]] = None):
    """Create mock origin application."""
    server = MockOriginServer(public_dir)
    return server.app


if __name__ == "__main__":
    import uvicorn
    from shared.config import get_config
    config = get_config("origin", 8080)
    uvicorn.run(create_app(config.origin_public_dir), host=config.host, port=config.port)
