"""
Response Cache Middleware

Serves repeated GET requests from a bounded in-memory ``TTLCache``.

Behaviour:
- Key is method + path + query string with parameters sorted
- Fresh hit: stored status, headers and body are replayed; the route is not called
- Miss or expired: the route runs; only 200 responses are stored
- Errors are never cached, so the next request retries from scratch
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional
from urllib.parse import urlencode

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.cache.store import TTLCache
from src.utils.logging_config import get_logger

logger = get_logger(__name__)

CACHE_STATUS_HEADER = "X-Cache"


@dataclass(frozen=True)
class CachedResponse:
    """A complete response captured after the body was fully read."""

    status_code: int
    headers: tuple[tuple[str, str], ...]
    body: bytes

    def to_response(self, cache_status: str) -> Response:
        headers = dict(self.headers)
        headers[CACHE_STATUS_HEADER] = cache_status
        return Response(content=self.body, status_code=self.status_code, headers=headers)


def cache_key(request: Request) -> str:
    """Canonical identity of a request: method, path and sorted query."""
    query = urlencode(sorted(request.query_params.multi_items()))
    return f"{request.method} {request.url.path}?{query}"


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """Caches successful GET responses in a shared ``TTLCache``."""

    def __init__(self, app: ASGIApp, cache: TTLCache, paths: Optional[Iterable[str]] = None) -> None:
        super().__init__(app)
        self.cache = cache
        # None caches every path
        self.paths = frozenset(paths) if paths is not None else None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method != "GET":
            return await call_next(request)
        if self.paths is not None and request.url.path not in self.paths:
            return await call_next(request)

        key = cache_key(request)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit", key=key)
            return cached.to_response("HIT")

        logger.debug("Cache miss", key=key)
        response = await call_next(request)
        if response.status_code != 200:
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        entry = CachedResponse(
            status_code=response.status_code,
            headers=tuple(
                (name, value)
                for name, value in response.headers.items()
                if name.lower() != CACHE_STATUS_HEADER.lower()
            ),
            body=body,
        )
        evicted = self.cache.put(key, entry)
        if evicted is not None:
            logger.debug("Cache eviction", key=evicted)

        return entry.to_response("MISS")
