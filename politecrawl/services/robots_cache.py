from typing import Dict, Optional

from politecrawl.services.robots_policy import RobotsPolicy


class RobotsCache:
    """
    Robots policies resolved during a crawl, keyed by host.

    A host maps to None when its robots.txt could not be used, which means
    "allow everything". Entries are never expired within a run: robots.txt
    is assumed stable for the run's duration. Only the crawler's master loop
    touches the cache, so it takes no lock.
    """

    def __init__(self):
        self._cache: Dict[str, Optional[RobotsPolicy]] = {}

    def __contains__(self, host: str) -> bool:
        return host in self._cache

    def get(self, host: str) -> Optional[RobotsPolicy]:
        """Get the cached policy for a host, or None if not cached or unusable."""
        return self._cache.get(host)

    def set(self, host: str, policy: Optional[RobotsPolicy]) -> None:
        self._cache[host] = policy

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)
