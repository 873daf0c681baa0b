import logging
from typing import Callable, List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from politecrawl.domain.enums import LogFlags

logger = logging.getLogger(__name__)


def effective_base_url(page_url: str, base_href: Optional[str]) -> str:
    """Return the URL relative links on a page resolve against.

    An absolute base href replaces the page URL, a protocol-relative one keeps
    the page's scheme, an absolute path keeps scheme and host, anything else
    resolves relative to the page.
    """
    if not base_href or not base_href.strip():
        return page_url
    return urljoin(page_url, base_href.strip())


def _default_log(level: LogFlags, msg: str, *args) -> None:
    logger.debug(msg, *args)


class LinkExtractor:
    """Harvests anchor targets from a parsed page."""

    def __init__(self, log: Optional[Callable] = None):
        self._log = log or _default_log

    @staticmethod
    def parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    def base_url(self, page_url: str, doc: BeautifulSoup) -> str:
        base = doc.find("base", href=True)
        if base is None:
            return page_url
        try:
            return effective_base_url(page_url, base.get("href"))
        except ValueError as e:
            self._log(LogFlags.ERROR, "ERROR parsing base href %s: %s", base.get("href"), e)
            return page_url

    def extract_links(self, page_url: str, doc: BeautifulSoup) -> List[str]:
        """Resolve every `a[href]` on the page to an absolute URL.

        Empty and fragment-only hrefs are skipped, unparsable ones are logged
        and skipped.
        """
        base = self.base_url(page_url, doc)
        urls = []
        for a in doc.find_all("a", href=True):
            href = a.get("href").strip()
            if not href or href.startswith("#"):
                continue
            try:
                urls.append(urljoin(base, href))
            except ValueError as e:
                self._log(LogFlags.ERROR, "ERROR parsing URL %s: %s", href, e)
        return urls
