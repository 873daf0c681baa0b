import threading
import time
from collections import Counter
from pathlib import Path
from unittest.mock import MagicMock
from urllib.parse import urlsplit

import pytest

from politecrawl.domain.http_response import HttpResponse
from politecrawl.domain.options import Options
from politecrawl.exceptions import EnqueueRedirectError, HttpFetchError
from politecrawl.services.extender import DefaultExtender

TESTDATA = Path(__file__).parent / "testdata"


class SpyExtender(DefaultExtender):
    """Extender serving tests/testdata/<host>/<path> and recording every hook call.

    Missing files are served as 404. Hooks can be replaced by passing
    callables; those receive the same arguments as the hook.
    """

    def __init__(self, *, redirects=None, unreachable=(), **overrides):
        super().__init__(http_service=MagicMock())
        self.calls = Counter()
        self.fetches = []
        self.visited_ctxs = []
        self.disallowed_ctxs = []
        self.errors = []
        self.delay_infos = []
        self.robots_requests = []
        self.end_reason = None
        self.redirects = redirects or {}
        self.unreachable = set(unreachable)
        self._overrides = overrides
        self._lock = threading.Lock()

    def _count(self, name):
        with self._lock:
            self.calls[name] += 1

    def _hook(self, name, default, *args):
        self._count(name)
        fn = self._overrides.get(name)
        if fn is not None:
            return fn(*args)
        return default(*args)

    def start(self, seeds):
        return self._hook("start", super().start, seeds)

    def end(self, reason):
        self.end_reason = reason
        return self._hook("end", super().end, reason)

    def error(self, err):
        with self._lock:
            self.errors.append(err)
        return self._hook("error", super().error, err)

    def compute_delay(self, host, delay_info, last_fetch):
        with self._lock:
            self.delay_infos.append(delay_info)
        return self._hook("compute_delay", super().compute_delay, host, delay_info, last_fetch)

    def fetch(self, ctx, user_agent, head_request):
        with self._lock:
            self.fetches.append((ctx.url, head_request, time.monotonic()))
        return self._hook("fetch", self._serve, ctx, user_agent, head_request)

    def _serve(self, ctx, user_agent, head_request):
        parts = urlsplit(ctx.url)
        if parts.netloc in self.unreachable:
            raise HttpFetchError(ctx.url, ConnectionError("host unreachable"))
        if ctx.url in self.redirects:
            raise EnqueueRedirectError(ctx.url, self.redirects[ctx.url])
        path = TESTDATA / parts.netloc / parts.path.lstrip("/")
        if not path.is_file():
            return HttpResponse(404, "", "text/plain")
        return HttpResponse(200, path.read_text(encoding="utf-8"), "text/html")

    def request_get(self, ctx, head_response):
        return self._hook("request_get", super().request_get, ctx, head_response)

    def request_robots(self, ctx, robot_agent):
        with self._lock:
            self.robots_requests.append(ctx.url)
        return self._hook("request_robots", super().request_robots, ctx, robot_agent)

    def fetched_robots(self, ctx, response):
        return self._hook("fetched_robots", super().fetched_robots, ctx, response)

    def filter(self, ctx, is_visited):
        return self._hook("filter", super().filter, ctx, is_visited)

    def enqueued(self, ctx):
        return self._hook("enqueued", super().enqueued, ctx)

    def visit(self, ctx, response, doc):
        return self._hook("visit", super().visit, ctx, response, doc)

    def visited(self, ctx, harvested):
        with self._lock:
            self.visited_ctxs.append(ctx)
        return self._hook("visited", super().visited, ctx, harvested)

    def disallowed(self, ctx):
        with self._lock:
            self.disallowed_ctxs.append(ctx)
        return self._hook("disallowed", super().disallowed, ctx)

    def fetched_urls(self):
        return [url for url, _, _ in self.fetches]


@pytest.fixture
def spy_factory():
    return SpyExtender


@pytest.fixture
def make_options():
    def _make(extender, **kwargs):
        kwargs.setdefault("crawl_delay", 0.0)
        kwargs.setdefault("worker_idle_ttl", 0.0)
        return Options(extender=extender, **kwargs)
    return _make
