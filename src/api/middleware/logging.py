"""
Request Logging Middleware

Provides request tracing and automatic request/response logging for FastAPI.

Features:
- Generates a short request_id for each request
- Binds request_id to structlog context so pipeline logs carry it
- Logs method, path, status code, cache status and duration
- Clears context after the request to prevent leakage
"""

import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.utils.logging_config import bind_context, clear_context, get_logger

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Adds a request id and one completion log line to every request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        bind_context(request_id=request_id)

        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        logger.debug("Request started", method=method, path=path, client_ip=client_ip)

        start_time = time.perf_counter()

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000

            log_method = logger.info if response.status_code < 400 else logger.warning
            log_method(
                "Request completed",
                method=method,
                path=path,
                status_code=response.status_code,
                cache=response.headers.get("x-cache", "BYPASS"),
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Request-ID"] = request_id
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                "Request failed with exception",
                method=method,
                path=path,
                duration_ms=round(duration_ms, 2),
                error=str(e),
            )
            raise

        finally:
            clear_context()
