import requests
from typing import Callable

from politecrawl.domain.http_response import HttpResponse
from politecrawl.exceptions import EnqueueRedirectError, HttpFetchError


class HttpService:
    """
    HTTP client wrapper used by the default fetch hook.

    Requires http_client callable with the `requests.request` signature, so
    tests can inject a fake without patching.
    """

    def __init__(self, http_client: Callable, timeout: int = 10):
        self.timeout = timeout
        self.http_client = http_client

    def fetch(self, url: str, user_agent: str, *, head: bool = False, follow_redirects: bool = False) -> HttpResponse:
        """Fetch URL and return response with status code, body text, and Content-Type.

        Unless `follow_redirects` is set, a redirect response raises
        EnqueueRedirectError so the crawler can enqueue its target instead.
        """
        method = "HEAD" if head else "GET"
        headers = {"User-Agent": user_agent}
        try:
            resp = self.http_client(
                method,
                url,
                headers=headers,
                timeout=self.timeout,
                allow_redirects=follow_redirects,
            )
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e) from e

        if not follow_redirects and resp.is_redirect:
            raise EnqueueRedirectError(url, resp.headers["Location"])

        ct = None
        if hasattr(resp, 'headers'):
            ct = resp.headers.get('Content-Type')

        return HttpResponse(resp.status_code, resp.text, ct)

    def fetch_robots(self, robots_url: str, user_agent: str) -> HttpResponse:
        """Fetch robots.txt, following redirects."""
        return self.fetch(robots_url, user_agent, follow_redirects=True)
