from dataclasses import dataclass
from typing import Optional

from politecrawl import config
from politecrawl.domain.enums import LogFlags
from politecrawl.utils.url_normalizer import NormalizationFlags


@dataclass
class Options:
    """Settings for one crawler.

    `user_agent` is sent with every fetch. `robot_user_agent` is only used to
    pick the matching robots.txt group and to fetch robots.txt itself.
    Durations are in seconds. `max_visits` of 0 means no budget and a
    `worker_idle_ttl` of 0 keeps host workers alive until the crawl ends.
    """
    user_agent: str = config.DEFAULT_USER_AGENT
    robot_user_agent: str = config.DEFAULT_ROBOT_USER_AGENT
    max_visits: int = 0
    crawl_delay: float = config.DEFAULT_CRAWL_DELAY
    worker_idle_ttl: float = config.DEFAULT_WORKER_IDLE_TTL
    same_host_only: bool = True
    head_before_get: bool = False
    normalization_flags: NormalizationFlags = NormalizationFlags.DEFAULT
    log_flags: LogFlags = LogFlags.ERROR
    extender: Optional[object] = None

    @classmethod
    def from_env(cls, extender=None) -> "Options":
        raw_log_flags = config.log_flags()
        return cls(
            user_agent=config.user_agent(),
            robot_user_agent=config.robot_user_agent(),
            max_visits=config.max_visits(),
            crawl_delay=config.crawl_delay(),
            worker_idle_ttl=config.worker_idle_ttl(),
            same_host_only=config.same_host_only(),
            head_before_get=config.head_before_get(),
            log_flags=LogFlags.parse(raw_log_flags) if raw_log_flags else LogFlags.ERROR,
            extender=extender,
        )
