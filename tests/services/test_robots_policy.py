import pytest

from politecrawl.domain.http_response import HttpResponse
from politecrawl.exceptions import RobotsParseError
from politecrawl.services.robots_cache import RobotsCache
from politecrawl.services.robots_policy import RobotsPolicy

ROBOTS_TXT = """\
User-agent: politecrawl
Disallow: /private
Crawl-delay: 3

User-agent: *
Disallow: /
"""


def test_agent_specific_group_is_used():
    policy = RobotsPolicy.parse(ROBOTS_TXT, "politecrawl")
    assert not policy.allows("/private/page.html")
    assert policy.allows("/public")
    assert policy.crawl_delay == 3.0


def test_other_agents_fall_back_to_wildcard_group():
    policy = RobotsPolicy.parse(ROBOTS_TXT, "otherbot")
    assert not policy.allows("/public")
    assert policy.crawl_delay is None


def test_fractional_crawl_delay_is_kept_per_group():
    text = (
        "User-agent: politecrawl\n"
        "Crawl-delay: 0.5  # half a second\n"
        "\n"
        "User-agent: *\n"
        "Crawl-delay: 1.25\n"
    )
    assert RobotsPolicy.parse(text, "politecrawl").crawl_delay == 0.5
    assert RobotsPolicy.parse(text, "otherbot").crawl_delay == 1.25


def test_empty_path_is_root():
    policy = RobotsPolicy.parse("User-agent: *\nDisallow: /\n", "politecrawl")
    assert not policy.allows("")


@pytest.mark.parametrize("status,allowed", [
    (404, True),
    (410, True),
    (401, False),
    (403, False),
    (500, False),
    (503, False),
])
def test_from_response_status_handling(status, allowed):
    policy = RobotsPolicy.from_response(HttpResponse(status, ""), "politecrawl")
    assert policy.allows("/anything") is allowed
    assert policy.crawl_delay is None


def test_from_response_parses_success_body():
    res = HttpResponse(200, "User-agent: *\nDisallow: /page2.html\n")
    policy = RobotsPolicy.from_response(res, "politecrawl")
    assert not policy.allows("/page2.html")
    assert policy.allows("/page1.html")


def test_from_response_rejects_unexpected_status():
    with pytest.raises(RobotsParseError):
        RobotsPolicy.from_response(HttpResponse(301, ""), "politecrawl")


def test_from_data_accepts_bytes_and_text():
    assert not RobotsPolicy.from_data(b"User-agent: *\nDisallow: /x\n", "a").allows("/x")
    assert not RobotsPolicy.from_data("User-agent: *\nDisallow: /x\n", "a").allows("/x")


def test_from_data_rejects_undecodable_bytes():
    with pytest.raises(RobotsParseError):
        RobotsPolicy.from_data(b"\xff\xfe\xfa", "politecrawl")


def test_robots_cache_remembers_unusable_policies():
    cache = RobotsCache()
    policy = RobotsPolicy.allow_all("politecrawl")
    cache.set("hosta", policy)
    cache.set("hostb", None)

    assert "hosta" in cache
    assert "hostb" in cache
    assert "hostc" not in cache
    assert cache.get("hosta") is policy
    assert cache.get("hostb") is None
    assert len(cache) == 2

    cache.clear()
    assert "hosta" not in cache
