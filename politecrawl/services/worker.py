import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlsplit

from bs4 import ParserRejectedMarkup

from politecrawl.domain.enums import CrawlErrorKind, LogFlags
from politecrawl.domain.fetch_info import DelayInfo, FetchInfo
from politecrawl.domain.http_response import HttpResponse
from politecrawl.domain.options import Options
from politecrawl.domain.url_context import Harvest, URLContext
from politecrawl.exceptions import CrawlError, EnqueueRedirectError, HttpFetchError, RobotsParseError
from politecrawl.services.crawl_log import get_log_func
from politecrawl.services.host_queue import HostQueue
from politecrawl.services.link_extractor import LinkExtractor
from politecrawl.services.protocols import Extender
from politecrawl.services.robots_policy import RobotsPolicy

logger = logging.getLogger(__name__)


@dataclass
class WorkerResponse:
    """Message sent from a host worker to the crawler.

    Exactly one is sent per admitted URL. Idle deaths and collaborator
    failures are sent as their own messages and carry no URL outcome.
    """
    host: str
    worker_index: int
    ctx: Optional[URLContext] = None
    visited: bool = False
    harvested: Optional[Harvest] = None
    idle_death: bool = False
    robots: Optional[RobotsPolicy] = None
    robots_resolved: bool = False
    next_fetch_at: float = 0.0
    failure: Optional[BaseException] = None


class HostWorker:
    """Fetches the URLs of one host, one at a time, politely.

    The first context a fresh worker receives is its host's robots.txt,
    unless the crawler hands it an already resolved policy. Every other
    context gets exactly one WorkerResponse on the push queue.
    """

    def __init__(
        self,
        host: str,
        index: int,
        options: Options,
        push_queue: "queue.Queue[WorkerResponse]",
        stop_event: threading.Event,
        *,
        robots: Optional[RobotsPolicy] = None,
        robots_resolved: bool = False,
        next_fetch_at: float = 0.0,
    ):
        self.host = host
        self.index = index
        self.pop = HostQueue()
        self.robots = robots
        self.robots_resolved = robots_resolved
        self.next_fetch_at = next_fetch_at
        self._opts = options
        self._ext: Extender = options.extender
        self._push = push_queue
        self._stop = stop_event
        self._log = get_log_func(self._ext, options.log_flags, index)
        self._extractor = LinkExtractor(log=self._log)
        self._last_fetch: Optional[FetchInfo] = None
        self._last_crawl_delay = options.crawl_delay
        self._thread = threading.Thread(target=self.run, name=f"politecrawl-worker-{index}", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        self._thread.join(timeout)

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def run(self) -> None:
        try:
            self._run()
        except Exception as e:
            # Collaborator failures end the whole crawl; the crawler re-raises them.
            logger.exception("worker %d for host %s failed", self.index, self.host)
            self._push.put(WorkerResponse(self.host, self.index, failure=e))
        finally:
            self._log(LogFlags.INFO, "worker done.")

    def _run(self) -> None:
        idle_ttl = self._opts.worker_idle_ttl if self._opts.worker_idle_ttl > 0 else None
        while True:
            if self._stop.is_set():
                self._log(LogFlags.INFO, "stop signal received.")
                return

            self._log(LogFlags.TRACE, "waiting for pop...")
            try:
                ctx = self.pop.pop(timeout=idle_ttl)
            except queue.Empty:
                self._log(LogFlags.INFO, "idle timeout received.")
                self._send_idle_death()
                return
            if ctx is None:
                self._log(LogFlags.INFO, "stop signal received.")
                return

            self._log(LogFlags.TRACE, "popped: %s", ctx.url)
            if ctx.is_robots_url:
                self._request_robots_txt(ctx)
            elif self._is_allowed_per_robots_policies(ctx):
                self._request_url(ctx, ctx.head_before_get)
            else:
                self._log(LogFlags.IGNORED, "ignored on robots.txt policy: %s", ctx.url)
                self._ext.disallowed(ctx)
                self._send_response(ctx, visited=False)

    def _is_allowed_per_robots_policies(self, ctx: URLContext) -> bool:
        if self.robots is None:
            return True
        return self.robots.allows(urlsplit(ctx.normalized_url).path)

    def _request_robots_txt(self, ctx: URLContext) -> None:
        agent = self._opts.robot_user_agent
        data, do_request = self._ext.request_robots(ctx, agent)
        if not do_request:
            self._log(LogFlags.INFO, "using robots.txt from cache")
            self.robots = self._robots_policy(ctx, data=data)
        else:
            response = self._fetch_url(ctx, agent, head=False)
            if response is not None:
                self._ext.fetched_robots(ctx, response)
                self.robots = self._robots_policy(ctx, response=response)
        self.robots_resolved = True

    def _robots_policy(self, ctx: URLContext, *, data=None, response: Optional[HttpResponse] = None) -> Optional[RobotsPolicy]:
        agent = self._opts.robot_user_agent
        try:
            if response is not None:
                return RobotsPolicy.from_response(response, agent)
            if data is None:
                return None
            return RobotsPolicy.from_data(data, agent)
        except RobotsParseError as e:
            self._ext.error(CrawlError(ctx, CrawlErrorKind.PARSE_ROBOTS, e))
            self._log(LogFlags.ERROR, "ERROR parsing robots.txt for host %s: %s", self.host, e)
            return None

    def _request_url(self, ctx: URLContext, head_request: bool) -> None:
        response = self._fetch_url(ctx, self._opts.user_agent, head_request)
        if response is None:
            return

        if response.ok:
            harvested = self._visit_url(ctx, response)
            self._send_response(ctx, visited=True, harvested=harvested)
        else:
            self._ext.error(CrawlError(
                ctx, CrawlErrorKind.HTTP_STATUS_CODE, message=f"status code {response.status_code}"
            ))
            self._log(LogFlags.ERROR, "ERROR status code for %s: %s", ctx.url, response.status_code)
            self._send_response(ctx, visited=False)

    def _wait_for_crawl_delay(self) -> bool:
        """Sleep until the host may be fetched again. Returns False if stopped meanwhile."""
        remaining = self.next_fetch_at - time.monotonic()
        if remaining > 0:
            return not self._stop.wait(remaining)
        return True

    def _set_crawl_delay(self, ctx: URLContext) -> None:
        robots_delay = self.robots.crawl_delay if self.robots is not None else None
        info = DelayInfo(
            opts_delay=self._opts.crawl_delay,
            robots_delay=robots_delay,
            last_delay=self._last_crawl_delay,
        )
        delay = self._ext.compute_delay(self.host, info, self._last_fetch)
        if ctx.crawl_delay is not None:
            delay = ctx.crawl_delay
        self._last_crawl_delay = delay
        self._log(LogFlags.INFO, "using crawl-delay: %gs", delay)

    def _fetch_url(self, ctx: URLContext, agent: str, head: bool) -> Optional[HttpResponse]:
        """Fetch `ctx`, issuing HEAD first when asked to.

        Returns the final response, or None when the URL has already been
        dealt with (reported to the crawler, or abandoned on stop).
        """
        while True:
            if not self._wait_for_crawl_delay():
                self._log(LogFlags.INFO, "stop signal received while waiting to fetch %s", ctx.url)
                return None
            self._set_crawl_delay(ctx)

            started = time.monotonic()
            # The crawl delay runs from the start of the fetch.
            self.next_fetch_at = started + self._last_crawl_delay
            try:
                response = self._ext.fetch(ctx, agent, head)
            except EnqueueRedirectError as e:
                self._last_fetch = None
                self._send_response(ctx, visited=False, harvested=self._redirect_harvest(ctx, e))
                return None
            except HttpFetchError as e:
                self._last_fetch = None
                self._ext.error(CrawlError(ctx, CrawlErrorKind.FETCH, e))
                self._log(LogFlags.ERROR, "ERROR fetching %s: %s", ctx.url, e)
                self._send_response(ctx, visited=False)
                return None

            self._last_fetch = FetchInfo(
                ctx=ctx,
                duration=time.monotonic() - started,
                status_code=response.status_code,
                is_head_request=head,
            )
            if not head:
                return response

            head = False
            if not self._ext.request_get(ctx, response):
                self._log(LogFlags.IGNORED, "ignored on HEAD filter policy: %s", ctx.url)
                self._send_response(ctx, visited=False)
                return None

    def _redirect_harvest(self, ctx: URLContext, e: EnqueueRedirectError) -> Optional[Harvest]:
        try:
            target = urljoin(ctx.url, e.location)
            redirect_ctx = ctx.clone_for_redirect(target, self._opts.normalization_flags)
        except ValueError as err:
            self._ext.error(CrawlError(ctx, CrawlErrorKind.PARSE_REDIRECT_URL, err))
            self._log(LogFlags.ERROR, "ERROR parsing redirect URL %s: %s", e.location, err)
            return None
        self._log(
            LogFlags.TRACE, "redirect to %s from %s, linked from %s",
            redirect_ctx.url, ctx.url, redirect_ctx.source_url,
        )
        return Harvest.single(redirect_ctx)

    def _visit_url(self, ctx: URLContext, response: HttpResponse) -> Optional[Harvest]:
        doc = None
        try:
            doc = self._extractor.parse(response.text or "")
        except ParserRejectedMarkup as e:
            self._ext.error(CrawlError(ctx, CrawlErrorKind.PARSE_BODY, e))
            self._log(LogFlags.ERROR, "ERROR parsing %s: %s", ctx.url, e)

        harvested, find_links = self._ext.visit(ctx, response, doc)
        if find_links:
            if doc is not None:
                harvested = Harvest.many(self._extractor.extract_links(ctx.url, doc))
            else:
                self._ext.error(CrawlError(ctx, CrawlErrorKind.PROCESS_LINKS, message="no document to process links"))
                self._log(LogFlags.ERROR, "ERROR processing links %s", ctx.url)

        self._ext.visited(ctx, harvested)
        return harvested

    def _send_response(self, ctx: URLContext, *, visited: bool, harvested: Optional[Harvest] = None) -> None:
        # robots.txt was never counted by the crawler, and nobody listens once stopped
        if ctx.is_robots_url or self._stop.is_set():
            return
        self._push.put(WorkerResponse(self.host, self.index, ctx=ctx, visited=visited, harvested=harvested))

    def _send_idle_death(self) -> None:
        if self._stop.is_set():
            return
        self._push.put(WorkerResponse(
            self.host,
            self.index,
            idle_death=True,
            robots=self.robots,
            robots_resolved=self.robots_resolved,
            next_fetch_at=self.next_fetch_at,
        ))
