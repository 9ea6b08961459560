"""Per-site sliding-window request counters."""
import asyncio
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from ..core.logging import logger
from .config import RateLimitWindow
from .errors import CrawlerError


class SiteRateLimiter:
    """
    Tracks navigation timestamps per site.

    Counters are updated under a lock so overlapping crawls share one
    consistent view of each site's window.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._windows: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()

    def _evict(self, stamps: Deque[float], now: float, span: float) -> None:
        while stamps and now - stamps[0] >= span:
            stamps.popleft()

    async def acquire(self, site_id: str, window: RateLimitWindow) -> None:
        """
        Record one request for ``site_id``.

        Raises:
            CrawlerError: ``rate_limit`` kind, with seconds until a slot frees up
        """
        async with self._lock:
            now = self._clock()
            span = window.window_ms / 1000
            stamps = self._windows[site_id]
            self._evict(stamps, now, span)

            if len(stamps) >= window.requests:
                retry_after = round(span - (now - stamps[0]), 3)
                logger.warning(f"Rate limit window full for {site_id}, retry in {retry_after}s")
                raise CrawlerError.rate_limit(site_id, retry_after=retry_after)

            stamps.append(now)

    def remaining(self, site_id: str, window: RateLimitWindow) -> int:
        stamps = self._windows.get(site_id)
        if not stamps:
            return window.requests
        self._evict(stamps, self._clock(), window.window_ms / 1000)
        return max(window.requests - len(stamps), 0)

    def reset(self, site_id: Optional[str] = None) -> None:
        if site_id is None:
            self._windows.clear()
        else:
            self._windows.pop(site_id, None)
