"""
Request Pipeline

Sequences fetch → recency filter → title translation → build → render for a
single feed URL. Stages run strictly one after another; the first failure
short-circuits the rest and propagates as a ``FeedProxyError``.
"""

from __future__ import annotations

import time

from src.feeds import recency
from src.feeds.builder import build
from src.feeds.errors import InvalidRequest
from src.feeds.render import RenderedFeed, render_atom
from src.feeds.source import FeedSource
from src.feeds.translator import TitleTranslator
from src.utils.logging_config import get_logger

logger = get_logger(__name__)


class RequestPipeline:
    """Turns a feed URL into a translated Atom document.

    The feed source, translator and target language are long-lived
    capabilities injected at construction; the pipeline keeps no state
    between calls.
    """

    def __init__(
        self,
        source: FeedSource,
        translator: TitleTranslator,
        target_language: str,
        max_items: int = recency.MAX_ITEMS,
    ) -> None:
        self.source = source
        self.translator = translator
        self.target_language = target_language
        self.max_items = max_items

    async def run(self, url: str) -> RenderedFeed:
        if not url:
            raise InvalidRequest("Feed url is required")

        start_time = time.perf_counter()

        feed = await self.source.fetch(url)
        feed.items = recency.select(feed.items, limit=self.max_items)
        feed.items = await self.translator.translate(feed.items, self.target_language)
        rendered = render_atom(build(feed))

        logger.info(
            "Feed translated",
            url=url,
            items=len(feed.items),
            target_language=self.target_language,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return rendered
