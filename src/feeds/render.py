"""Atom serialization of the output feed model via feedgen."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from uuid import NAMESPACE_URL, uuid5

from feedgen.feed import FeedGenerator

from src.feeds.builder import OutputAuthor, OutputFeed
from src.feeds.errors import RenderFailure
from src.feeds.models import ZERO_TIME

ATOM_CONTENT_TYPE = "application/atom+xml; charset=utf-8"


@dataclass(frozen=True)
class RenderedFeed:
    """Serialized feed ready to be written to a response."""

    body: bytes
    content_type: str = ATOM_CONTENT_TYPE


def _first_set(*times: datetime) -> Optional[datetime]:
    for t in times:
        if t != ZERO_TIME:
            return t
    return None


def _newest_entry_time(items) -> Optional[datetime]:
    times = [t for item in items if (t := _first_set(item.updated, item.created))]
    return max(times, default=None)


def _author_dict(author: Optional[OutputAuthor]) -> Optional[dict]:
    if author is None or not (author.name or author.email):
        return None
    return {"name": author.name or author.email, "email": author.email}


def _urn(*parts: str) -> str:
    return f"urn:uuid:{uuid5(NAMESPACE_URL, '|'.join(parts))}"


def render_atom(feed: OutputFeed, now: Optional[datetime] = None) -> RenderedFeed:
    """Serialize *feed* as an Atom 1.0 document.

    Zero timestamps are treated as absent. Atom requires an ``updated`` value
    on the feed and on every entry. An undated feed takes the time of its
    newest entry; an undated entry takes the feed's time. *now* is used only
    when nothing in the document carries a time.

    Raises:
        RenderFailure: If feedgen or lxml rejects a value.
    """
    now = now or datetime.now(timezone.utc)
    feed_id = feed.link.href or _urn(feed.title)
    feed_updated = _first_set(feed.updated, feed.created) or _newest_entry_time(feed.items) or now

    try:
        fg = FeedGenerator()
        fg.id(feed_id)
        fg.title(feed.title or "Untitled")
        if feed.link.href:
            fg.link(href=feed.link.href, rel="alternate")
        if feed.description:
            fg.subtitle(feed.description)
        if author := _author_dict(feed.author):
            fg.author(author)
        fg.updated(feed_updated)

        for item in feed.items:
            # Entries are appended so document order matches the recency order
            fe = fg.add_entry(order="append")
            fe.id(item.link.href or _urn(feed_id, item.title))
            fe.title(item.title or "Untitled")
            if item.link.href:
                fe.link(href=item.link.href, rel="alternate")
            if item.description:
                fe.summary(item.description)
            if author := _author_dict(item.author):
                fe.author(author)
            if item.created != ZERO_TIME:
                fe.published(item.created)
            fe.updated(_first_set(item.updated, item.created) or feed_updated)

        body = fg.atom_str(pretty=True)
    except (ValueError, TypeError) as e:
        raise RenderFailure(f"Failed to render Atom feed: {e}") from e

    return RenderedFeed(body=body)
