from typing import Callable

from politecrawl.domain.enums import LogFlags

LogFunc = Callable[..., None]


def get_log_func(extender, log_flags: LogFlags, worker_index: int = 0) -> LogFunc:
    """Return a `log(msg_level, fmt, *args)` function bound to an extender.

    Messages whose level is not fully enabled in `log_flags` are dropped
    before formatting. Worker messages are prefixed with the worker index.
    """
    def log(msg_level: LogFlags, fmt: str, *args) -> None:
        if msg_level & log_flags != msg_level:
            return
        msg = fmt % args if args else fmt
        if worker_index > 0:
            msg = f"worker {worker_index} - {msg}"
        else:
            msg = f"crawler - {msg}"
        extender.log(log_flags, msg_level, msg)

    return log
