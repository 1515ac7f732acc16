"""Feed builder: internal ``Feed`` → output feed model.

The output model always carries well-formed values. Missing timestamps become
``ZERO_TIME`` and missing authors become ``None`` rather than disappearing,
so the renderer never has to guess which fields exist.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.feeds.models import ZERO_TIME, Author, Feed, Item


class OutputAuthor(BaseModel):
    name: str = ""
    email: str = ""


class OutputLink(BaseModel):
    href: str = ""


class OutputItem(BaseModel):
    title: str
    description: str = ""
    link: OutputLink = Field(default_factory=OutputLink)
    author: Optional[OutputAuthor] = None
    created: datetime = ZERO_TIME
    updated: datetime = ZERO_TIME


class OutputFeed(BaseModel):
    title: str
    link: OutputLink = Field(default_factory=OutputLink)
    description: str = ""
    items: list[OutputItem] = Field(default_factory=list)
    author: Optional[OutputAuthor] = None
    created: datetime = ZERO_TIME
    updated: datetime = ZERO_TIME


def _author(author: Optional[Author]) -> Optional[OutputAuthor]:
    if author is None:
        return None
    return OutputAuthor(name=author.name, email=author.email)


def _item(item: Item) -> OutputItem:
    return OutputItem(
        title=item.title,
        description=item.description,
        link=OutputLink(href=item.link),
        author=_author(item.author),
        created=item.published or ZERO_TIME,
        updated=item.updated or ZERO_TIME,
    )


def build(feed: Feed) -> OutputFeed:
    """Map *feed* field by field onto the output model."""
    return OutputFeed(
        title=feed.title,
        link=OutputLink(href=feed.link),
        description=feed.description,
        items=[_item(item) for item in feed.items],
        author=_author(feed.author),
        created=feed.created or ZERO_TIME,
        updated=feed.updated or ZERO_TIME,
    )
