"""Title translation: one batched backend call per feed.

All titles of a feed travel to the backend in a single request and come
back positionally aligned. The batch succeeds or fails as a whole: when the
backend errors, times out or returns a different number of texts, no title
is rewritten and ``TranslationFailure`` propagates to the caller.
"""

from __future__ import annotations

import dataclasses
from typing import Protocol

from src.feeds.errors import TranslationFailure
from src.feeds.models import Item
from src.utils.logging_config import get_logger

logger = get_logger(__name__)


class TranslationBackend(Protocol):
    """Anything able to translate an ordered batch of texts."""

    async def translate_batch(self, texts: list[str], target_language: str) -> list[str]:
        ...


def build_batch(items: list[Item]) -> list[tuple[int, str]]:
    """Pair every item title with its position in the feed."""
    return [(idx, item.title) for idx, item in enumerate(items)]


def annotate_title(translated: str, original: str) -> str:
    return f"{translated} ({original})"


class TitleTranslator:
    """Rewrites item titles as ``"<translated> (<original>)"``."""

    def __init__(self, backend: TranslationBackend) -> None:
        self._backend = backend

    async def translate(self, items: list[Item], target_language: str) -> list[Item]:
        """Translate every title in one backend call.

        Returns new ``Item`` objects in the same order; the input items are
        never modified, so a failure leaves them exactly as they were.
        """
        if not items:
            return []

        batch = build_batch(items)
        texts = [text for _, text in batch]

        try:
            translations = await self._backend.translate_batch(texts, target_language)
        except TranslationFailure:
            raise
        except Exception as e:
            raise TranslationFailure(f"Translation backend error: {e!r}") from e

        if len(translations) != len(batch):
            raise TranslationFailure(
                f"Translation response misaligned: sent {len(batch)} texts, got {len(translations)}"
            )

        titles = [annotate_title(translated, original) for (_, original), translated in zip(batch, translations)]
        logger.debug("Translated titles", count=len(titles), target_language=target_language)

        return [dataclasses.replace(items[idx], title=title) for (idx, _), title in zip(batch, titles)]
