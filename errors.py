"""
Error types raised while building the channel dashboard.
"""


class DashboardError(Exception):
    """Base class for every failure that ends a dashboard submission."""


class YouTubeAPIError(DashboardError):
    """A YouTube Data API call yielded no usable result."""


class NotFound(YouTubeAPIError):
    """The channel or video lookup matched nothing."""


class FetchError(YouTubeAPIError):
    """Transport or decoding failure. Keeps the original exception."""

    def __init__(self, context: str, original: Exception):
        super().__init__(f"{context}: {original}")
        self.context = context
        self.original = original


class MalformedInput(DashboardError, ValueError):
    """A value from the API does not have the expected format."""
