from politecrawl.container import Container
from politecrawl.domain.enums import LogFlags
from politecrawl.services.crawler import Crawler
from politecrawl.services.extender import DefaultExtender


def test_container_wires_crawler():
    container = Container()
    container.config.from_dict({"POLITECRAWL_CRAWL_DELAY": 0.25, "POLITECRAWL_MAX_VISITS": 3})

    crawler = container.crawler()
    assert isinstance(crawler, Crawler)
    assert isinstance(crawler.options.extender, DefaultExtender)
    assert crawler.options.crawl_delay == 0.25
    assert crawler.options.max_visits == 3
    assert crawler.options.extender.http_service is container.http_service()


def test_container_builds_fresh_options_per_crawler():
    container = Container()
    a = container.crawler()
    b = container.crawler()
    assert a is not b
    assert a.options is not b.options
    assert a.options.extender is b.options.extender


def test_container_parses_log_flags():
    container = Container()
    container.config.from_dict({"POLITECRAWL_LOG_FLAGS": "error|info"})
    assert container.crawler().options.log_flags == LogFlags.ERROR | LogFlags.INFO
