class VisitedTracker:
    """
    Tracks which normalized URLs have been admitted during a crawl.

    Entries are write-once and never evicted: forgetting a URL would let it be
    admitted a second time and break the pending-count bookkeeping.
    Owned by the crawler's master loop, so it takes no lock.
    """

    def __init__(self):
        self._visited: set = set()

    def mark(self, url: str) -> bool:
        """Mark a URL as visited. Returns False if it already was."""
        if url in self._visited:
            return False
        self._visited.add(url)
        return True

    def is_visited(self, url: str) -> bool:
        """Check if a URL has been visited."""
        return url in self._visited

    def __len__(self) -> int:
        return len(self._visited)
