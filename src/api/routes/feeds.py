"""Translated feed API route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from src.feeds.errors import FeedProxyError, InvalidRequest
from src.feeds.pipeline import RequestPipeline
from src.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["feeds"])


def get_pipeline(request: Request) -> RequestPipeline:
    """FastAPI dependency: the pipeline built at startup."""
    return request.app.state.pipeline


def get_cache_ttl(request: Request) -> int:
    return request.app.state.settings.cache.ttl_seconds


@router.get("/feed")
async def translated_feed(
    url: str | None = Query(None, description="Address of the feed to translate"),
    pipeline: RequestPipeline = Depends(get_pipeline),
    ttl_seconds: int = Depends(get_cache_ttl),
) -> Response:
    """Fetch a feed, translate its newest item titles and return it as Atom.

    The response advertises the same lifetime as the server-side cache so
    downstream caches expire in step with it.
    """
    feed_url = (url or "").strip()
    if not feed_url:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'url' is required.",
        )

    try:
        rendered = await pipeline.run(feed_url)
    except InvalidRequest as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except FeedProxyError as e:
        logger.warning(
            "Feed pipeline failed",
            url=feed_url,
            stage_error=type(e).__name__,
            error=str(e),
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to build translated feed.",
        ) from e

    return Response(
        content=rendered.body,
        media_type=rendered.content_type,
        headers={"Cache-Control": f"public, max-age={ttl_seconds}"},
    )
