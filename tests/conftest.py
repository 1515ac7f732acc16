"""Shared fixtures for the feed proxy tests."""

from datetime import datetime, timezone

import pytest

from src.feeds.models import Item


class FakeBackend:
    """Translation backend that prefixes every text and records its calls."""

    def __init__(self, prefix: str = "JA:", fail_with: Exception | None = None) -> None:
        self.prefix = prefix
        self.fail_with = fail_with
        self.calls: list[tuple[list[str], str]] = []

    async def translate_batch(self, texts: list[str], target_language: str) -> list[str]:
        self.calls.append((list(texts), target_language))
        if self.fail_with is not None:
            raise self.fail_with
        return [f"{self.prefix}{text}" for text in texts]


def ts(day: int, hour: int = 0) -> datetime:
    return datetime(2024, 1, day, hour, tzinfo=timezone.utc)


def make_item(title: str, published: datetime | None = None, updated: datetime | None = None) -> Item:
    return Item(title=title, link=f"https://example.com/{title}", published=published, updated=updated)


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()
