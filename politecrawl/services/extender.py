import logging
from typing import Optional

import requests

from politecrawl.domain.enums import EndReason, LogFlags
from politecrawl.domain.fetch_info import DelayInfo, FetchInfo
from politecrawl.domain.http_response import HttpResponse
from politecrawl.domain.url_context import Harvest, URLContext
from politecrawl.exceptions import CrawlError
from politecrawl.services.http_service import HttpService

crawl_logger = logging.getLogger("politecrawl")

_LOG_LEVELS = {
    LogFlags.ERROR: logging.ERROR,
    LogFlags.INFO: logging.INFO,
}


class DefaultExtender:
    """Extender with the stock behaviour for every hook.

    Fetches over HTTP with `HttpService`, follows robots.txt, extracts links
    from every page and never revisits a URL.
    """

    def __init__(self, http_service: Optional[HttpService] = None):
        self.http_service = http_service or HttpService(http_client=requests.request)

    def start(self, seeds):
        return seeds

    def end(self, reason: EndReason) -> None:
        pass

    def error(self, err: CrawlError) -> None:
        pass

    def log(self, log_flags: LogFlags, msg_level: LogFlags, msg: str) -> None:
        if msg_level & log_flags == msg_level:
            crawl_logger.log(_LOG_LEVELS.get(msg_level, logging.DEBUG), msg)

    def compute_delay(self, host: str, delay_info: DelayInfo, last_fetch: Optional[FetchInfo]) -> float:
        if delay_info.robots_delay is not None and delay_info.robots_delay > 0:
            return delay_info.robots_delay
        return delay_info.opts_delay

    def fetch(self, ctx: URLContext, user_agent: str, head_request: bool) -> HttpResponse:
        if ctx.is_robots_url:
            return self.http_service.fetch_robots(ctx.url, user_agent)
        return self.http_service.fetch(ctx.url, user_agent, head=head_request)

    def request_get(self, ctx: URLContext, head_response: HttpResponse) -> bool:
        return head_response.ok

    def request_robots(self, ctx: URLContext, robot_agent: str):
        return None, True

    def fetched_robots(self, ctx: URLContext, response: HttpResponse) -> None:
        pass

    def filter(self, ctx: URLContext, is_visited: bool) -> bool:
        return not is_visited

    def enqueued(self, ctx: URLContext) -> None:
        pass

    def visit(self, ctx: URLContext, response: HttpResponse, doc):
        return None, True

    def visited(self, ctx: URLContext, harvested: Optional[Harvest]) -> None:
        pass

    def disallowed(self, ctx: URLContext) -> None:
        pass
