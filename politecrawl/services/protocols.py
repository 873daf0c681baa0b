"""Protocol (interface) definitions for services."""

from typing import Any, Optional, Protocol, Tuple, Union

from politecrawl.domain.enums import EndReason, LogFlags
from politecrawl.domain.fetch_info import DelayInfo, FetchInfo
from politecrawl.domain.http_response import HttpResponse
from politecrawl.domain.url_context import Harvest, URLContext
from politecrawl.exceptions import CrawlError


class Extender(Protocol):
    """Hooks through which a crawl is customized.

    Every method is called by the engine at a fixed point of the crawl.
    `DefaultExtender` implements all of them; custom extenders usually
    subclass it or wrap one and override the hooks they care about.
    Hooks may be called from worker threads concurrently for different
    hosts; `start`, `end`, `filter` and `enqueued` run on the crawler's thread.
    """

    def start(self, seeds: Any) -> Any:
        """Called once before the crawl starts. Returns the seeds to use."""
        ...

    def end(self, reason: EndReason) -> None:
        """Called once after every worker has exited."""
        ...

    def error(self, err: CrawlError) -> None:
        ...

    def log(self, log_flags: LogFlags, msg_level: LogFlags, msg: str) -> None:
        ...

    def compute_delay(self, host: str, delay_info: DelayInfo, last_fetch: Optional[FetchInfo]) -> float:
        """Seconds to wait after the fetch that is about to start."""
        ...

    def fetch(self, ctx: URLContext, user_agent: str, head_request: bool) -> HttpResponse:
        """Fetch `ctx`. Raise HttpFetchError on transport failure, EnqueueRedirectError to enqueue a redirect."""
        ...

    def request_get(self, ctx: URLContext, head_response: HttpResponse) -> bool:
        ...

    def request_robots(self, ctx: URLContext, robot_agent: str) -> Tuple[Optional[Union[bytes, str]], bool]:
        """Return (data, do_request). When do_request is False, `data` is used as robots.txt."""
        ...

    def fetched_robots(self, ctx: URLContext, response: HttpResponse) -> None:
        ...

    def filter(self, ctx: URLContext, is_visited: bool) -> bool:
        """Decide whether a candidate URL is enqueued. May adjust `ctx.head_before_get` or `ctx.crawl_delay`."""
        ...

    def enqueued(self, ctx: URLContext) -> None:
        ...

    def visit(self, ctx: URLContext, response: HttpResponse, doc: Any) -> Tuple[Optional[Harvest], bool]:
        """Process a fetched page. Return (harvested, find_links); find_links asks for default link extraction."""
        ...

    def visited(self, ctx: URLContext, harvested: Optional[Harvest]) -> None:
        ...

    def disallowed(self, ctx: URLContext) -> None:
        ...
