"""Custom exceptions for politecrawl."""
from typing import Optional


class CrawlError(Exception):
    """Per-URL failure handed to the extender's `error` hook.

    Never raised out of a crawl run: workers build one, report it and move on.
    """

    def __init__(self, ctx, kind, original: Optional[BaseException] = None, message: Optional[str] = None):
        self.ctx = ctx
        self.kind = kind
        self.original = original
        text = message if message is not None else str(original)
        super().__init__(f"{kind.value}: {text}")


class HttpFetchError(Exception):
    """Raised when an HTTP fetch fails due to network/transport errors."""

    def __init__(self, url: str, original: Exception):
        self.url = url
        self.original = original
        super().__init__(f"HTTP fetch failed for {url}: {original}")


class EnqueueRedirectError(Exception):
    """Raised by a fetch when the response is a redirect that should be enqueued."""

    def __init__(self, url: str, location: str):
        self.url = url
        self.location = location
        super().__init__(f"redirect from {url} to {location}")


class RobotsParseError(Exception):
    """Raised when robots.txt content cannot be turned into a policy."""
