from enum import Enum
from typing import Any, Iterator, Mapping, NamedTuple, Optional, Sequence, Union
from urllib.parse import urlsplit, urlunsplit

from politecrawl.utils.url_normalizer import NormalizationFlags, normalize_url

ROBOTS_PATH = "/robots.txt"


class URLContext:
    """One URL to process, along with where it came from.

    `normalized_url` is computed once at construction and is the key used for
    deduplication and host assignment. `source_url` is None only for seeds.
    `head_before_get` and `crawl_delay` may be changed by the extender's
    `filter` hook before the URL is fetched.
    """

    def __init__(
        self,
        url: str,
        normalized_url: str,
        source_url: Optional[str] = None,
        normalized_source_url: Optional[str] = None,
        *,
        head_before_get: bool = False,
        state: Any = None,
    ):
        self._url = url
        self._normalized_url = normalized_url
        self._source_url = source_url
        self._normalized_source_url = normalized_source_url
        self.head_before_get = head_before_get
        self.state = state
        self.crawl_delay: Optional[float] = None

    @classmethod
    def from_url(
        cls,
        url: str,
        source_url: Optional[str] = None,
        flags: NormalizationFlags = NormalizationFlags.DEFAULT,
        *,
        head_before_get: bool = False,
        state: Any = None,
    ) -> "URLContext":
        """Build a context for `url`, normalizing it and its source. Raises ValueError on a malformed URL."""
        normalized = normalize_url(url, flags)
        normalized_source = normalize_url(source_url, flags) if source_url is not None else None
        return cls(url, normalized, source_url, normalized_source, head_before_get=head_before_get, state=state)

    @property
    def url(self) -> str:
        return self._url

    @property
    def normalized_url(self) -> str:
        return self._normalized_url

    @property
    def source_url(self) -> Optional[str]:
        return self._source_url

    @property
    def normalized_source_url(self) -> Optional[str]:
        return self._normalized_source_url

    @property
    def normalized_host(self) -> str:
        return urlsplit(self._normalized_url).netloc

    @property
    def is_robots_url(self) -> bool:
        return urlsplit(self._normalized_url).path.lower() == ROBOTS_PATH

    def clone_for_redirect(self, target: str, flags: NormalizationFlags) -> "URLContext":
        """Derive the context for a redirect target.

        The source of the new context is the source of the original request
        (or the original URL itself for a seed), so a chain of redirects keeps
        pointing back at the page that linked to its first hop.
        """
        src, normalized_src = self._source_url, self._normalized_source_url
        if src is None:
            src, normalized_src = self._url, self._normalized_url
        return URLContext(
            target,
            normalize_url(target, flags),
            src,
            normalized_src,
            head_before_get=self.head_before_get,
            state=self.state,
        )

    def robots_url_context(self) -> "URLContext":
        parts = urlsplit(self._normalized_url)
        robots_url = urlunsplit((parts.scheme, parts.netloc, ROBOTS_PATH, "", ""))
        return URLContext(robots_url, robots_url, self._source_url, self._normalized_source_url)

    def __repr__(self) -> str:
        return f"URLContext({self._url!r}, source={self._source_url!r})"


class HarvestKind(Enum):
    SINGLE = "single"
    MANY = "many"
    KEYED = "keyed"


class HarvestEntry(NamedTuple):
    target: Union[str, URLContext]
    state: Any = None


HarvestTarget = Union[str, URLContext]


class Harvest:
    """URLs handed back to the crawler after a visit, or supplied as seeds.

    Build one with `single`, `many` or `keyed`. Only keyed harvests attach
    state to the contexts created for their URLs.
    """

    def __init__(self, kind: HarvestKind, entries: Sequence[HarvestEntry]):
        self.kind = kind
        self._entries = tuple(entries)

    @classmethod
    def single(cls, target: HarvestTarget) -> "Harvest":
        return cls(HarvestKind.SINGLE, [HarvestEntry(target)])

    @classmethod
    def many(cls, targets: Sequence[HarvestTarget]) -> "Harvest":
        return cls(HarvestKind.MANY, [HarvestEntry(t) for t in targets])

    @classmethod
    def keyed(cls, targets: Mapping[HarvestTarget, Any]) -> "Harvest":
        return cls(HarvestKind.KEYED, [HarvestEntry(t, s) for t, s in targets.items()])

    @classmethod
    def of(cls, value) -> "Harvest":
        """Convert a seed-style value into a Harvest.

        Accepts None, a Harvest, a URL string, a URLContext, a list/tuple/set
        of those, or a mapping of those to state. Anything else is a
        programming error and raises TypeError.
        """
        if value is None:
            return cls(HarvestKind.MANY, [])
        if isinstance(value, Harvest):
            return value
        if isinstance(value, (str, URLContext)):
            return cls.single(value)
        if isinstance(value, Mapping):
            cls._check_targets(value.keys())
            return cls.keyed(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            cls._check_targets(value)
            return cls.many(list(value))
        raise TypeError(f"unsupported URL value type: {type(value).__name__}")

    @staticmethod
    def _check_targets(targets) -> None:
        for t in targets:
            if not isinstance(t, (str, URLContext)):
                raise TypeError(f"unsupported URL value type: {type(t).__name__}")

    def __iter__(self) -> Iterator[HarvestEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Harvest({self.kind.value}, {[e.target for e in self._entries]!r})"
