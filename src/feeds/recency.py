"""Recency filter: newest items first, bounded window."""

from src.feeds.models import Item, effective_timestamp

MAX_ITEMS = 10


def select(items: list[Item], limit: int = MAX_ITEMS) -> list[Item]:
    """Return the *limit* most recent items, newest first.

    The sort is stable, so items sharing a timestamp (including items with no
    timestamp at all, which sort last) keep their source order. The input list
    is left untouched.
    """
    ordered = sorted(items, key=effective_timestamp, reverse=True)
    return ordered[:limit]
