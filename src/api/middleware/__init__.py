"""API Middleware."""

from src.api.middleware.cache import ResponseCacheMiddleware
from src.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ResponseCacheMiddleware"]
