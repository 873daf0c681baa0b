import re
from typing import Optional, Union
from urllib.robotparser import RobotFileParser

from politecrawl.domain.http_response import HttpResponse
from politecrawl.exceptions import RobotsParseError

_FRACTIONAL_CRAWL_DELAY = re.compile(r"^\s*crawl-delay\s*:\s*(\d*\.\d+)\s*(?:#.*)?$", re.IGNORECASE)
_DELAY_MARKER_BASE = 10 ** 9


class RobotsPolicy:
    """Parsed robots.txt rules as they apply to one robot user agent."""

    def __init__(self, parser: RobotFileParser, user_agent: str):
        self._parser = parser
        self.user_agent = user_agent

    @classmethod
    def parse(cls, text: str, user_agent: str) -> "RobotsPolicy":
        """Parse robots.txt `text`.

        RobotFileParser only keeps whole-second Crawl-delay values, so
        fractional ones are swapped for integer markers before parsing and
        restored on the parsed entries afterwards.
        """
        lines, fractions = [], {}
        for line in text.splitlines():
            match = _FRACTIONAL_CRAWL_DELAY.match(line)
            if match:
                marker = _DELAY_MARKER_BASE + len(fractions)
                fractions[marker] = float(match.group(1))
                line = f"Crawl-delay: {marker}"
            lines.append(line)

        parser = RobotFileParser()
        parser.parse(lines)
        for entry in [*parser.entries, parser.default_entry]:
            if entry is not None and entry.delay in fractions:
                entry.delay = fractions[entry.delay]
        return cls(parser, user_agent)

    @classmethod
    def allow_all(cls, user_agent: str) -> "RobotsPolicy":
        parser = RobotFileParser()
        parser.allow_all = True
        return cls(parser, user_agent)

    @classmethod
    def disallow_all(cls, user_agent: str) -> "RobotsPolicy":
        parser = RobotFileParser()
        parser.disallow_all = True
        return cls(parser, user_agent)

    @classmethod
    def from_response(cls, response: HttpResponse, user_agent: str) -> "RobotsPolicy":
        """Build a policy from a fetched robots.txt.

        Access-denied and server errors close the whole host, a missing file
        opens it. Any other status raises RobotsParseError.
        """
        status = response.status_code
        if 200 <= status < 300:
            return cls.parse(response.text or "", user_agent)
        if status in (401, 403):
            return cls.disallow_all(user_agent)
        if 400 <= status < 500:
            return cls.allow_all(user_agent)
        if 500 <= status < 600:
            return cls.disallow_all(user_agent)
        raise RobotsParseError(f"unexpected robots.txt status code {status}")

    @classmethod
    def from_data(cls, data: Union[bytes, str], user_agent: str) -> "RobotsPolicy":
        """Build a policy from robots.txt content supplied by the caller."""
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise RobotsParseError(f"robots.txt is not valid UTF-8: {e}") from e
        return cls.parse(data, user_agent)

    def allows(self, path: str) -> bool:
        return self._parser.can_fetch(self.user_agent, path or "/")

    @property
    def crawl_delay(self) -> Optional[float]:
        """Crawl-delay declared for this agent, in seconds, or None."""
        delay = self._parser.crawl_delay(self.user_agent)
        if delay is None:
            return None
        return float(delay)
