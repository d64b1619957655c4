"""
Cacheability rules for origin responses.
"""

from typing import Optional, Tuple


DEFAULT_API_PREFIX = "/api/"

CACHEABLE_CONTENT_TYPES: Tuple[str, ...] = (
    "text/html",
    "text/css",
    "application/javascript",
    "image/",
    "font/",
)


def is_cacheable(key: str, content_type: Optional[str], api_prefix: str = DEFAULT_API_PREFIX) -> bool:
    """Decide whether an origin response for ``key`` may be stored.

    API paths are never cached, even if the router let one through.
    Origin Cache-Control directives are ignored; only the content type
    counts, and a missing content type means "do not cache".
    """
    if key.startswith(api_prefix):
        return False
    if not content_type:
        return False
    return content_type.startswith(CACHEABLE_CONTENT_TYPES)
