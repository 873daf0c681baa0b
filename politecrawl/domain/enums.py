from enum import Enum, Flag


class EndReason(Enum):
    DONE = "done"
    MAX_VISITS = "max_visits"
    ERROR = "error"
    INTERRUPTED = "interrupted"


class CrawlErrorKind(Enum):
    FETCH = "fetch"
    PARSE_ROBOTS = "parse_robots"
    HTTP_STATUS_CODE = "http_status_code"
    PARSE_BODY = "parse_body"
    PARSE_URL = "parse_url"
    PROCESS_LINKS = "process_links"
    PARSE_REDIRECT_URL = "parse_redirect_url"


class LogFlags(Flag):
    """Categories of engine log messages. `ALL` enables every category."""

    NONE = 0
    ERROR = 1
    INFO = 2
    ENQUEUED = 4
    IGNORED = 8
    TRACE = 16
    ALL = ERROR | INFO | ENQUEUED | IGNORED | TRACE

    @classmethod
    def parse(cls, value: str) -> "LogFlags":
        """Parse a `|` or `,` separated list of flag names, e.g. "error|info"."""
        flags = cls.NONE
        for name in value.replace(",", "|").split("|"):
            name = name.strip().upper()
            if name:
                flags |= cls[name]
        return flags
