import queue
import threading
from typing import List, Optional

from politecrawl.domain.url_context import URLContext


class HostQueue:
    """Single-slot mailbox between the crawler and one host worker.

    The slot holds at most one pending batch. A push while a batch is still
    unconsumed merges into it (old entries first, then the new ones), so a
    push never blocks and never drops anything. `pop` hands out one context at
    a time and keeps the rest of the batch in the slot.

    Once closed (by `close()` or by an idle `pop` timeout) the queue refuses
    pushes and `pop` returns None.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._batch: Optional[List[URLContext]] = None
        self._closed = False

    def push(self, *ctxs: URLContext) -> bool:
        """Stack `ctxs` into the slot. Returns False if the queue is closed."""
        with self._cond:
            if self._closed:
                return False
            if not ctxs:
                return True
            if self._batch is None:
                self._batch = list(ctxs)
            else:
                self._batch = self._batch + list(ctxs)
            self._cond.notify()
            return True

    def pop(self, timeout: Optional[float] = None) -> Optional[URLContext]:
        """Block until a context is available and return it.

        Returns None once the queue is closed. If `timeout` elapses with
        nothing to hand out, the queue closes itself, so no later push can
        land in a mailbox nobody reads, and `queue.Empty` is raised.
        """
        with self._cond:
            if not self._cond.wait_for(lambda: self._batch is not None or self._closed, timeout):
                self._closed = True
                raise queue.Empty
            if self._closed:
                return None
            ctx, *rest = self._batch
            self._batch = rest or None
            return ctx

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._batch) if self._batch else 0
