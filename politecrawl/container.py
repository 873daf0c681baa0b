"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from politecrawl import config as env
from politecrawl.domain.enums import LogFlags
from politecrawl.domain.options import Options
from politecrawl.services.crawler import Crawler
from politecrawl.services.extender import DefaultExtender
from politecrawl.services.http_service import HttpService


# Environment variables used by the container (read via `politecrawl.config` helpers).
#
# POLITECRAWL_USER_AGENT (str)
#   User-Agent header sent with every page fetch.
#
# POLITECRAWL_ROBOT_USER_AGENT (str)
#   Agent name matched against robots.txt groups; also sent when fetching robots.txt.
#
# POLITECRAWL_CRAWL_DELAY (float seconds, default: 5.0)
#   Delay between two fetches to the same host, unless robots.txt declares one.
#
# POLITECRAWL_MAX_VISITS (int, default: 0)
#   Visit budget for a run; 0 means unlimited.
#
# POLITECRAWL_WORKER_IDLE_TTL (float seconds, default: 10.0)
#   A host worker with no work for this long exits; 0 keeps workers until the end.
#
# POLITECRAWL_SAME_HOST_ONLY (bool, default: true)
# POLITECRAWL_HEAD_BEFORE_GET (bool, default: false)
#
# POLITECRAWL_HTTP_TIMEOUT (int seconds, default: 10)
#   Timeout for outbound HTTP requests.
#
# POLITECRAWL_LOG_FLAGS (str, default: "error")
#   Log categories to emit, e.g. "error|info"; see LogFlags.parse.
ENV = {
    "POLITECRAWL_USER_AGENT": env.user_agent(),
    "POLITECRAWL_ROBOT_USER_AGENT": env.robot_user_agent(),
    "POLITECRAWL_CRAWL_DELAY": env.crawl_delay(),
    "POLITECRAWL_MAX_VISITS": env.max_visits(),
    "POLITECRAWL_WORKER_IDLE_TTL": env.worker_idle_ttl(),
    "POLITECRAWL_SAME_HOST_ONLY": env.same_host_only(),
    "POLITECRAWL_HEAD_BEFORE_GET": env.head_before_get(),
    "POLITECRAWL_HTTP_TIMEOUT": env.http_timeout(),
    "POLITECRAWL_LOG_FLAGS": env.log_flags() or "error",
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for politecrawl."""

    config = providers.Configuration(default=ENV)

    http_service = providers.Singleton(
        HttpService,
        http_client=providers.Object(requests.request),
        timeout=config.POLITECRAWL_HTTP_TIMEOUT.as_(int),
    )

    extender = providers.Singleton(
        DefaultExtender,
        http_service=http_service,
    )

    options = providers.Factory(
        Options,
        user_agent=config.POLITECRAWL_USER_AGENT.as_(str),
        robot_user_agent=config.POLITECRAWL_ROBOT_USER_AGENT.as_(str),
        max_visits=config.POLITECRAWL_MAX_VISITS.as_(int),
        crawl_delay=config.POLITECRAWL_CRAWL_DELAY.as_(float),
        worker_idle_ttl=config.POLITECRAWL_WORKER_IDLE_TTL.as_(float),
        same_host_only=config.POLITECRAWL_SAME_HOST_ONLY,
        head_before_get=config.POLITECRAWL_HEAD_BEFORE_GET,
        log_flags=config.POLITECRAWL_LOG_FLAGS.as_(LogFlags.parse),
        extender=extender,
    )

    crawler = providers.Factory(
        Crawler,
        options=options,
    )
