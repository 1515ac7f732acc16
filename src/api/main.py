"""
FastAPI Application Entry Point

This module provides the FastAPI application for the feed translation proxy.

Usage:
    uvicorn src.api.main:app --port 8080

Or with the CLI:
    python -m src.api.main
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI, Request

from src.api.middleware import LoggingMiddleware, ResponseCacheMiddleware
from src.api.routes import feeds_router
from src.api.schemas import CacheSnapshot, HealthResponse
from src.cache.store import EvictionPolicy, LFUPolicy, LRUPolicy, TTLCache
from src.config.settings import (
    AppSettings,
    CacheSettings,
    EvictionPolicyType,
    TranslationSettings,
    get_app_settings,
    resolve_api_settings,
    resolve_logging_settings,
)
from src.feeds.google_translate import GoogleTranslateBackend, load_service_account_credentials
from src.feeds.pipeline import RequestPipeline
from src.feeds.source import FeedSource
from src.feeds.translator import TitleTranslator
from src.utils.logging_config import configure_logging, get_logger

# Load environment variables
load_dotenv()

# Initialize logging (must be called before creating loggers)
configure_logging(resolve_logging_settings())

logger = get_logger(__name__)


def build_cache(settings: CacheSettings) -> TTLCache:
    policy: EvictionPolicy
    if settings.eviction_policy == EvictionPolicyType.LFU:
        policy = LFUPolicy()
    else:
        policy = LRUPolicy()
    return TTLCache(capacity=settings.capacity, ttl_seconds=settings.ttl_seconds, policy=policy)


def build_translation_backend(
    settings: TranslationSettings,
    client: httpx.AsyncClient,
) -> GoogleTranslateBackend:
    """Resolve translation credentials once for the lifetime of the process."""
    credentials = None
    if settings.credentials_json:
        try:
            credentials = load_service_account_credentials(settings.credentials_json)
        except ValueError as e:
            # Service still starts; translated requests fail with 500
            logger.error("Invalid translation credentials", error=str(e))

    backend = GoogleTranslateBackend(client, credentials=credentials, api_key=settings.api_key)
    if not backend.configured:
        logger.warning("No translation credentials configured; /feed requests will fail")
    return backend


def create_app(
    settings: Optional[AppSettings] = None,
    pipeline: Optional[RequestPipeline] = None,
    cache: Optional[TTLCache] = None,
) -> FastAPI:
    """Build the application.

    When *pipeline* is given it is used as-is and no outbound clients are
    created, which is how tests substitute their own capabilities. A *cache*
    may be passed in the same way.
    """
    settings = settings or get_app_settings()
    cache = cache if cache is not None else build_cache(settings.cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the outbound HTTP clients for the lifetime of the app."""
        if pipeline is not None:
            yield
            return

        logger.info("Starting feed translation proxy", target_language=settings.pipeline.target_language)
        headers = {"User-Agent": settings.pipeline.user_agent}
        async with httpx.AsyncClient(headers=headers) as feed_client, httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(settings.translation.timeout_seconds),
        ) as translate_client:
            backend = build_translation_backend(settings.translation, translate_client)
            app.state.pipeline = RequestPipeline(
                source=FeedSource(feed_client, timeout=settings.pipeline.fetch_timeout_seconds),
                translator=TitleTranslator(backend),
                target_language=settings.pipeline.target_language,
                max_items=settings.pipeline.max_items,
            )
            logger.info("API ready", cache_capacity=cache.capacity, cache_ttl=cache.ttl_seconds)

            yield

            logger.info("Shutting down API")
            backend.close()

    app = FastAPI(
        title="Feed Translation Proxy",
        description="Fetches a syndication feed, translates item titles and serves it as Atom",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = cache
    if pipeline is not None:
        app.state.pipeline = pipeline

    # Cache sits inside logging so hits are logged and timed too
    app.add_middleware(ResponseCacheMiddleware, cache=cache, paths=("/feed",))
    app.add_middleware(LoggingMiddleware)

    app.include_router(feeds_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="feed-translate-proxy",
            cache=CacheSnapshot(**request.app.state.cache.snapshot()),
        )

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    api_settings = resolve_api_settings()

    uvicorn.run(
        "src.api.main:app",
        host=api_settings.host,
        port=api_settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
