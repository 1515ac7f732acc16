"""Internal feed model shared by the pipeline stages."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

# Sentinel used when neither an updated nor a published time is known.
ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class Author:
    name: str = ""
    email: str = ""


@dataclass
class Item:
    """A single entry of a feed."""

    title: str
    description: str = ""
    link: str = ""
    author: Optional[Author] = None
    published: Optional[datetime] = None
    updated: Optional[datetime] = None


@dataclass
class Feed:
    """A parsed feed, owned by one pipeline invocation."""

    title: str
    link: str = ""
    description: str = ""
    items: list[Item] = field(default_factory=list)
    author: Optional[Author] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None


def effective_timestamp(item: Item) -> datetime:
    """Return the time used to order *item*: updated, then published, then ZERO_TIME."""
    if item.updated is not None:
        return item.updated
    if item.published is not None:
        return item.published
    return ZERO_TIME
