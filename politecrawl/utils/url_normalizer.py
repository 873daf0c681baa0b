"""URL canonicalization used for deduplication and host partitioning."""
import re
from enum import Flag
from urllib.parse import urlsplit, urlunsplit

_ESCAPE_RE = re.compile(r"%[0-9a-fA-F]{2}")
_DUPLICATE_SLASHES_RE = re.compile(r"/{2,}")
_DIRECTORY_INDEX_RE = re.compile(r"(^|/)(?:default|index)\.\w{1,4}$")
_DEFAULT_PORTS = {"http": 80, "https": 443}


class NormalizationFlags(Flag):
    NONE = 0
    LOWERCASE_SCHEME = 1
    LOWERCASE_HOST = 2
    UPPERCASE_ESCAPES = 4
    REMOVE_DEFAULT_PORT = 8
    REMOVE_TRAILING_SLASH = 16
    ADD_TRAILING_SLASH = 32
    REMOVE_DOT_SEGMENTS = 64
    REMOVE_DIRECTORY_INDEX = 128
    REMOVE_FRAGMENT = 256
    FORCE_HTTP = 512
    REMOVE_DUPLICATE_SLASHES = 1024
    REMOVE_WWW = 2048
    SORT_QUERY = 4096

    SAFE = LOWERCASE_SCHEME | LOWERCASE_HOST | UPPERCASE_ESCAPES | REMOVE_DEFAULT_PORT
    USUALLY_SAFE_GREEDY = SAFE | REMOVE_TRAILING_SLASH | REMOVE_DOT_SEGMENTS
    USUALLY_SAFE_NON_GREEDY = SAFE | ADD_TRAILING_SLASH | REMOVE_DOT_SEGMENTS
    UNSAFE_GREEDY = (
        USUALLY_SAFE_GREEDY | REMOVE_DIRECTORY_INDEX | REMOVE_FRAGMENT | FORCE_HTTP
        | REMOVE_DUPLICATE_SLASHES | REMOVE_WWW | SORT_QUERY
    )
    ALL_GREEDY = UNSAFE_GREEDY
    # Engine default: greedy on path and query, but keeps scheme and host as written.
    DEFAULT = USUALLY_SAFE_GREEDY | REMOVE_FRAGMENT | REMOVE_DUPLICATE_SLASHES | SORT_QUERY

    @classmethod
    def parse(cls, value: str) -> "NormalizationFlags":
        """Parse a `|` or `,` separated list of flag or preset names."""
        flags = cls.NONE
        for name in value.replace(",", "|").split("|"):
            name = name.strip().upper()
            if name:
                flags |= cls[name]
        return flags


def _remove_dot_segments(path: str) -> str:
    segments = path.split("/")
    out = []
    for seg in segments:
        if seg == ".":
            continue
        if seg == "..":
            # out[0] is the empty segment in front of an absolute path
            if len(out) > 1:
                out.pop()
            continue
        out.append(seg)
    if segments[-1] in (".", ".."):
        out.append("")
    return "/".join(out)


def _split_netloc(parts) -> tuple:
    """Return (userinfo, host, port) for a split URL. Raises ValueError on a bad port."""
    userinfo, _, hostport = parts.netloc.rpartition("@")
    port = parts.port
    if port is not None:
        host = hostport[:hostport.rfind(":")]
    else:
        host = hostport.rstrip(":")
    return userinfo, host, port


def normalize_url(url: str, flags: NormalizationFlags = NormalizationFlags.DEFAULT) -> str:
    """Canonicalize `url` according to `flags`.

    Two URLs that normalize to the same string are treated as the same
    resource by the crawler. Raises ValueError when the authority is malformed.
    """
    parts = urlsplit(url.strip())
    scheme, path, query, fragment = parts.scheme, parts.path, parts.query, parts.fragment

    if flags & NormalizationFlags.LOWERCASE_SCHEME:
        scheme = scheme.lower()
    if flags & NormalizationFlags.FORCE_HTTP and scheme.lower() == "https":
        scheme = "http"

    netloc = parts.netloc
    if netloc:
        userinfo, host, port = _split_netloc(parts)
        if flags & NormalizationFlags.LOWERCASE_HOST:
            host = host.lower()
        if flags & NormalizationFlags.REMOVE_WWW and host.lower().startswith("www."):
            host = host[4:]
        if flags & NormalizationFlags.REMOVE_DEFAULT_PORT and port == _DEFAULT_PORTS.get(scheme.lower()):
            port = None
        netloc = host if port is None else f"{host}:{port}"
        if userinfo:
            netloc = f"{userinfo}@{netloc}"

    if flags & NormalizationFlags.UPPERCASE_ESCAPES:
        path = _ESCAPE_RE.sub(lambda m: m.group(0).upper(), path)
        query = _ESCAPE_RE.sub(lambda m: m.group(0).upper(), query)
    if flags & NormalizationFlags.REMOVE_DUPLICATE_SLASHES:
        path = _DUPLICATE_SLASHES_RE.sub("/", path)
    if flags & NormalizationFlags.REMOVE_DOT_SEGMENTS:
        path = _remove_dot_segments(path)
    if flags & NormalizationFlags.REMOVE_DIRECTORY_INDEX:
        path = _DIRECTORY_INDEX_RE.sub(r"\1", path)
    if flags & NormalizationFlags.REMOVE_TRAILING_SLASH and path.endswith("/"):
        path = path[:-1]
    if flags & NormalizationFlags.ADD_TRAILING_SLASH and not path.endswith("/") and (path or netloc):
        path += "/"
    if flags & NormalizationFlags.SORT_QUERY and query:
        query = "&".join(sorted(query.split("&")))
    if flags & NormalizationFlags.REMOVE_FRAGMENT:
        fragment = ""

    return urlunsplit((scheme, netloc, path, query, fragment))
