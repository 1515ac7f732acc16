"""
Feed Source

Fetches a remote syndication feed over HTTP and hands the raw bytes to
feedparser, producing the internal ``Feed`` model.
"""

import time
from datetime import datetime, timezone
from typing import Any, Optional

import feedparser
import httpx

from src.feeds.errors import FetchFailure, InvalidRequest
from src.feeds.models import Author, Feed, Item
from src.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_FETCH_TIMEOUT = 30.0


def _to_datetime(parsed: Optional[time.struct_time]) -> Optional[datetime]:
    """Convert a feedparser UTC struct_time into an aware datetime."""
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None


def _to_author(detail: Any) -> Optional[Author]:
    if not detail:
        return None
    name = detail.get("name", "") or ""
    email = detail.get("email", "") or ""
    if not name and not email:
        return None
    return Author(name=name, email=email)


def _to_item(entry: Any) -> Item:
    return Item(
        title=entry.get("title", "") or "",
        description=entry.get("summary", "") or "",
        link=entry.get("link", "") or "",
        author=_to_author(entry.get("author_detail")),
        published=_to_datetime(entry.get("published_parsed")),
        updated=_to_datetime(entry.get("updated_parsed")),
    )


def parse_feed(content: bytes) -> Feed:
    """Parse raw feed bytes into a ``Feed``.

    Raises:
        FetchFailure: If feedparser cannot make a feed out of the body.
    """
    parsed = feedparser.parse(content)
    if not parsed.get("version"):
        raise FetchFailure("Body is not a recognised RSS or Atom document")
    if parsed.bozo and not parsed.entries:
        raise FetchFailure(f"Malformed feed document: {parsed.get('bozo_exception')}")

    meta = parsed.feed
    return Feed(
        title=meta.get("title", "") or "",
        link=meta.get("link", "") or "",
        description=meta.get("subtitle", "") or "",
        items=[_to_item(entry) for entry in parsed.entries],
        author=_to_author(meta.get("author_detail")),
        created=_to_datetime(meta.get("published_parsed")),
        updated=_to_datetime(meta.get("updated_parsed")),
    )


class FeedSource:
    """Fetches and parses feeds through a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient, timeout: float = DEFAULT_FETCH_TIMEOUT) -> None:
        self._client = client
        self._timeout = timeout

    async def fetch(self, url: str) -> Feed:
        """
        Fetch *url* once and parse the body as a feed.

        Args:
            url: Address of the origin feed. Must be non-empty.

        Returns:
            The parsed feed.

        Raises:
            InvalidRequest: If url is empty.
            FetchFailure: On transport errors, timeouts, non-2xx statuses or
                an unparseable body.
        """
        if not url:
            raise InvalidRequest("Feed url is required")

        try:
            response = await self._client.get(url, timeout=self._timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchFailure(f"Origin returned HTTP {e.response.status_code} for {url}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise FetchFailure(f"Failed to fetch {url}: {e!r}") from e

        feed = parse_feed(response.content)
        logger.debug("Fetched feed", url=url, items=len(feed.items))
        return feed
