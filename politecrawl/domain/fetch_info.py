from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DelayInfo:
    """Inputs to `Extender.compute_delay`, all in seconds.

    `robots_delay` is None when the host's robots.txt declares no crawl-delay
    for the robot user agent (or has not been fetched).
    """
    opts_delay: float
    robots_delay: Optional[float]
    last_delay: float


@dataclass(frozen=True)
class FetchInfo:
    """Outcome of the previous fetch on the same host."""
    ctx: object
    duration: float
    status_code: int
    is_head_request: bool
