"""Feed pipeline: fetch, filter, translate, rebuild and render."""

from src.feeds.errors import (
    FeedProxyError,
    FetchFailure,
    InvalidRequest,
    RenderFailure,
    TranslationFailure,
)
from src.feeds.pipeline import RequestPipeline
from src.feeds.render import RenderedFeed
from src.feeds.source import FeedSource
from src.feeds.translator import TitleTranslator, TranslationBackend

__all__ = [
    "FeedProxyError",
    "FeedSource",
    "FetchFailure",
    "InvalidRequest",
    "RenderFailure",
    "RenderedFeed",
    "RequestPipeline",
    "TitleTranslator",
    "TranslationBackend",
    "TranslationFailure",
]
