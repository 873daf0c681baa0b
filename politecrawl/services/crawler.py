import queue
import threading
from typing import Dict, List, Optional
from urllib.parse import urlsplit

from politecrawl.domain.enums import CrawlErrorKind, EndReason, LogFlags
from politecrawl.domain.options import Options
from politecrawl.domain.url_context import Harvest, URLContext
from politecrawl.domain.visited_tracker import VisitedTracker
from politecrawl.exceptions import CrawlError
from politecrawl.services.crawl_log import get_log_func
from politecrawl.services.robots_cache import RobotsCache
from politecrawl.services.worker import HostWorker, WorkerResponse

POLL_INTERVAL = 0.1


class Crawler:
    """Coordinates a crawl across one worker thread per host.

    `run()` executes the master loop on the calling thread. That loop alone
    owns the visited set, the pending count and the worker registry, so none
    of them needs a lock. Workers talk back through a single result queue.

    The pending count goes up by one for every URL pushed to a host queue and
    down by one for every result a worker reports, so the crawl is over when
    it reaches zero.
    """

    def __init__(self, options: Options, poll_interval: float = POLL_INTERVAL):
        self.options = options
        self.poll_interval = poll_interval
        self.visits = 0
        self._pending = 0
        self._visited = VisitedTracker()
        self._workers: Dict[str, HostWorker] = {}
        self._launched: List[HostWorker] = []
        self._worker_seq = 0
        self._seed_hosts: set = set()
        self._robots_cache = RobotsCache()
        self._next_fetch_at: Dict[str, float] = {}
        self._push: "queue.Queue[WorkerResponse]" = queue.Queue()
        self._enqueue: "queue.Queue[Harvest]" = queue.Queue()
        self._stop = threading.Event()
        self._interrupt = threading.Event()
        self._log = None

    def run(self, seeds=None) -> EndReason:
        """Crawl from `seeds` until there is no work left, the visit budget is spent, or `stop()` is called.

        Raises ValueError when no extender is configured and TypeError for an
        unsupported seed value. An exception raised by an extender hook stops
        every worker and is re-raised here after `end(EndReason.ERROR)`.
        """
        ext = self.options.extender
        if ext is None:
            raise ValueError("options.extender is required to run a crawl")
        self._log = get_log_func(ext, self.options.log_flags)
        self._interrupt.clear()
        self._enqueue = queue.Queue()

        seeds = Harvest.of(ext.start(seeds))
        ctxs = self._to_url_contexts(seeds, None)
        self._init(ctxs)

        try:
            self._enqueue_urls(ctxs)
            reason = self._collect_urls()
        except Exception:
            self._shutdown()
            ext.end(EndReason.ERROR)
            raise
        self._shutdown()
        ext.end(reason)
        return reason

    def stop(self) -> None:
        """Ask a running crawl to end. `run()` returns EndReason.INTERRUPTED."""
        self._interrupt.set()

    def enqueue(self, urls) -> None:
        """Submit extra URLs to a running crawl. Safe to call from any thread, hooks included."""
        self._enqueue.put(Harvest.of(urls))

    def _init(self, ctxs: List[URLContext]) -> None:
        self._seed_hosts = {ctx.normalized_host for ctx in ctxs}
        self._log(LogFlags.TRACE, "init() - seeds length: %d", len(ctxs))
        self._log(LogFlags.TRACE, "init() - host count: %d", len(self._seed_hosts))
        self._log(LogFlags.INFO, "robot user-agent: %s", self.options.robot_user_agent)

        self.visits = 0
        self._pending = 0
        self._visited = VisitedTracker()
        self._workers = {}
        self._launched = []
        self._worker_seq = 0
        self._robots_cache = RobotsCache()
        self._next_fetch_at = {}
        self._push = queue.Queue()
        self._stop = threading.Event()

    def _to_url_contexts(self, harvest: Optional[Harvest], source: Optional[URLContext]) -> List[URLContext]:
        if harvest is None:
            return []
        source_url = source.url if source is not None else None
        ctxs = []
        for entry in harvest:
            target = entry.target
            if isinstance(target, URLContext):
                if entry.state is not None:
                    target.state = entry.state
                ctxs.append(target)
                continue
            try:
                ctx = URLContext.from_url(
                    target,
                    source_url,
                    self.options.normalization_flags,
                    head_before_get=self.options.head_before_get,
                    state=entry.state,
                )
            except ValueError as e:
                self.options.extender.error(CrawlError(None, CrawlErrorKind.PARSE_URL, e))
                self._log(LogFlags.ERROR, "ERROR parsing URL %s: %s", target, e)
                continue
            ctxs.append(ctx)
        return ctxs

    def _is_same_host(self, ctx: URLContext) -> bool:
        if ctx.normalized_source_url is not None:
            return ctx.normalized_host == urlsplit(ctx.normalized_source_url).netloc
        return ctx.normalized_host in self._seed_hosts

    def _enqueue_urls(self, ctxs: List[URLContext]) -> int:
        ext = self.options.extender
        count = 0
        for ctx in ctxs:
            if ctx.is_robots_url:
                self._log(LogFlags.IGNORED, "ignore on robots.txt URL: %s", ctx.url)
                continue

            is_visited = self._visited.is_visited(ctx.normalized_url)
            if not ext.filter(ctx, is_visited):
                self._log(LogFlags.IGNORED, "ignore on filter policy: %s", ctx.normalized_url)
                continue

            scheme = urlsplit(ctx.normalized_url).scheme
            if not scheme:
                self._log(LogFlags.IGNORED, "ignore on absolute policy: %s", ctx.normalized_url)
            elif not scheme.lower().startswith("http"):
                self._log(LogFlags.IGNORED, "ignore on scheme policy: %s", ctx.normalized_url)
            elif self.options.same_host_only and not self._is_same_host(ctx):
                self._log(LogFlags.IGNORED, "ignore on same host policy: %s", ctx.normalized_url)
            else:
                self._stack(ctx)
                self._log(LogFlags.ENQUEUED, "enqueue: %s", ctx.url)
                ext.enqueued(ctx)
                self._pending += 1
                self._visited.mark(ctx.normalized_url)
                count += 1
        return count

    def _stack(self, ctx: URLContext) -> None:
        host = ctx.normalized_host
        worker = self._workers.get(host)
        if worker is not None and worker.pop.push(ctx):
            return
        # Unknown host, or its worker retired on idle timeout and refuses pushes.
        self._launch_worker(ctx, worker)

    def _launch_worker(self, ctx: URLContext, previous: Optional[HostWorker]) -> HostWorker:
        """Start a worker for `ctx`'s host with `ctx` (and robots.txt when unresolved) already queued."""
        host = ctx.normalized_host
        if previous is not None and previous.robots_resolved:
            robots_resolved, robots = True, previous.robots
            next_fetch_at = previous.next_fetch_at
        else:
            robots_resolved, robots = host in self._robots_cache, self._robots_cache.get(host)
            next_fetch_at = self._next_fetch_at.get(host, 0.0)

        self._worker_seq += 1
        worker = HostWorker(
            host,
            self._worker_seq,
            self.options,
            self._push,
            self._stop,
            robots=robots,
            robots_resolved=robots_resolved,
            next_fetch_at=next_fetch_at,
        )

        if robots_resolved:
            self._log(LogFlags.TRACE, "reusing robots.txt policy for host %s", host)
            worker.pop.push(ctx)
        else:
            robots_ctx = ctx.robots_url_context()
            self._log(LogFlags.ENQUEUED, "enqueue: %s", robots_ctx.url)
            self.options.extender.enqueued(robots_ctx)
            worker.pop.push(robots_ctx, ctx)

        # Queued before start: an idle pop timeout closes the queue to pushes.
        worker.start()
        self._workers[host] = worker
        self._launched.append(worker)
        self._log(LogFlags.INFO, "worker %d launched for host %s", worker.index, host)
        return worker

    def _drain_enqueued(self) -> None:
        while True:
            try:
                harvest = self._enqueue.get_nowait()
            except queue.Empty:
                return
            self._enqueue_urls(self._to_url_contexts(harvest, None))

    def _collect_urls(self) -> EndReason:
        max_visits = self.options.max_visits
        while True:
            if self._interrupt.is_set():
                self._log(LogFlags.INFO, "stop requested, sending STOP signals...")
                return EndReason.INTERRUPTED

            self._drain_enqueued()
            if self._pending == 0:
                self._log(LogFlags.INFO, "sending STOP signals...")
                return EndReason.DONE

            try:
                res = self._push.get(timeout=self.poll_interval)
            except queue.Empty:
                continue

            if res.failure is not None:
                raise res.failure

            if res.visited:
                self.visits += 1
                if max_visits > 0 and self.visits >= max_visits:
                    self._log(LogFlags.INFO, "sending STOP signals...")
                    return EndReason.MAX_VISITS

            if res.idle_death:
                self._retire_worker(res)
            else:
                self._pending -= 1
                self._log(LogFlags.TRACE, "got harvested links from %s", res.ctx.url)
                self._enqueue_urls(self._to_url_contexts(res.harvested, res.ctx))

    def _retire_worker(self, res: WorkerResponse) -> None:
        if res.robots_resolved:
            self._robots_cache.set(res.host, res.robots)
        self._next_fetch_at[res.host] = res.next_fetch_at
        worker = self._workers.get(res.host)
        if worker is not None and worker.index == res.worker_index:
            del self._workers[res.host]
            self._log(LogFlags.INFO, "worker for host %s cleared on idle policy", res.host)

    def _shutdown(self) -> None:
        self._stop.set()
        for worker in self._launched:
            worker.pop.close()
        self._log(LogFlags.INFO, "waiting for workers to complete...")
        for worker in self._launched:
            worker.join()
        self._log(LogFlags.INFO, "crawler done.")
