import pytest

from politecrawl.domain.url_context import Harvest, HarvestKind, URLContext
from politecrawl.utils.url_normalizer import NormalizationFlags


def test_from_url_normalizes_url_and_source():
    ctx = URLContext.from_url("HTTP://HostA:80/a/./b/", "http://hosta/index.html#top")
    assert ctx.url == "HTTP://HostA:80/a/./b/"
    assert ctx.normalized_url == "http://hosta/a/b"
    assert ctx.source_url == "http://hosta/index.html#top"
    assert ctx.normalized_source_url == "http://hosta/index.html"
    assert ctx.normalized_host == "hosta"


def test_seed_has_no_source():
    ctx = URLContext.from_url("http://hosta/")
    assert ctx.source_url is None
    assert ctx.normalized_source_url is None


def test_clone_for_redirect_keeps_original_source():
    flags = NormalizationFlags.ADD_TRAILING_SLASH
    p1 = URLContext.from_url("http://localhost/p1", None, flags, head_before_get=True, state="s")
    assert p1.normalized_url == "http://localhost/p1/"

    p2 = p1.clone_for_redirect("http://localhost/p2", flags)
    assert p2.url == "http://localhost/p2"
    assert p2.normalized_url == "http://localhost/p2/"
    assert p2.source_url == "http://localhost/p1"
    assert p2.normalized_source_url == "http://localhost/p1/"
    assert p2.head_before_get is True
    assert p2.state == "s"

    p3 = p2.clone_for_redirect("http://localhost/p3", flags)
    assert p3.source_url == "http://localhost/p1"
    assert p3.normalized_source_url == "http://localhost/p1/"


def test_clone_for_redirect_with_source():
    ctx = URLContext.from_url("http://hosta/p1", "http://hosta/index.html")
    clone = ctx.clone_for_redirect("http://hosta/p2", NormalizationFlags.DEFAULT)
    assert clone.source_url == "http://hosta/index.html"


def test_robots_url_context():
    ctx = URLContext.from_url("http://hosta:8080/some/page.html?q=1", "http://hostb/")
    robots = ctx.robots_url_context()
    assert robots.url == "http://hosta:8080/robots.txt"
    assert robots.normalized_url == "http://hosta:8080/robots.txt"
    assert robots.source_url == "http://hostb/"
    assert robots.head_before_get is False
    assert robots.state is None
    assert robots.is_robots_url
    assert not ctx.is_robots_url


def test_is_robots_url_ignores_case():
    assert URLContext.from_url("http://hosta/ROBOTS.TXT").is_robots_url
    assert not URLContext.from_url("http://hosta/sub/robots.txt").is_robots_url


def test_malformed_url_raises_value_error():
    with pytest.raises(ValueError):
        URLContext.from_url("http://hosta:notaport/")


def test_harvest_of_accepts_supported_values():
    ctx = URLContext.from_url("http://hosta/")
    assert Harvest.of(None).kind is HarvestKind.MANY
    assert len(Harvest.of(None)) == 0
    assert Harvest.of("http://hosta/").kind is HarvestKind.SINGLE
    assert Harvest.of(ctx).kind is HarvestKind.SINGLE
    assert Harvest.of(["http://hosta/", ctx]).kind is HarvestKind.MANY

    keyed = Harvest.of({"http://hosta/a": 1, "http://hosta/b": 2})
    assert keyed.kind is HarvestKind.KEYED
    assert [(e.target, e.state) for e in keyed] == [("http://hosta/a", 1), ("http://hosta/b", 2)]

    h = Harvest.single("http://hosta/")
    assert Harvest.of(h) is h


@pytest.mark.parametrize("value", [42, 3.5, object(), [1, 2], {1: "x"}])
def test_harvest_of_rejects_unsupported_values(value):
    with pytest.raises(TypeError):
        Harvest.of(value)
