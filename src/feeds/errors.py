"""Failure taxonomy for the feed pipeline.

Every stage raises a subclass of ``FeedProxyError``. The HTTP layer maps
``InvalidRequest`` to 400 and everything else to an opaque 500; the message
carried here is for logs only and never reaches the client.
"""


class FeedProxyError(Exception):
    """Base class for all pipeline failures."""


class InvalidRequest(FeedProxyError):
    """A required input was missing or empty."""


class FetchFailure(FeedProxyError):
    """The origin feed could not be fetched or parsed."""


class TranslationFailure(FeedProxyError):
    """The translation backend failed or returned a misaligned batch."""


class RenderFailure(FeedProxyError):
    """The output feed could not be serialized."""
