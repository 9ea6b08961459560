"""Tests for the per-site rate limiter."""

import pytest

from src.talent_harvest.crawler.config import RateLimitWindow
from src.talent_harvest.crawler.errors import CrawlerError, ErrorKind
from src.talent_harvest.crawler.rate_limit import SiteRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_window_fills_then_frees_up():
    clock = FakeClock()
    limiter = SiteRateLimiter(clock=clock)
    window = RateLimitWindow(requests=2, window_ms=10000)

    await limiter.acquire("zhipin", window)
    clock.now += 1
    await limiter.acquire("zhipin", window)
    assert limiter.remaining("zhipin", window) == 0

    with pytest.raises(CrawlerError) as exc_info:
        await limiter.acquire("zhipin", window)
    assert exc_info.value.kind == ErrorKind.RATE_LIMIT
    assert exc_info.value.platform == "zhipin"
    assert exc_info.value.retry_after == 9.0

    clock.now += 9
    await limiter.acquire("zhipin", window)


@pytest.mark.asyncio
async def test_sites_are_counted_separately():
    limiter = SiteRateLimiter(clock=FakeClock())
    window = RateLimitWindow(requests=1, window_ms=60000)

    await limiter.acquire("zhipin", window)
    await limiter.acquire("liepin", window)

    assert limiter.remaining("zhipin", window) == 0
    assert limiter.remaining("lagou", window) == 1

    limiter.reset("zhipin")
    assert limiter.remaining("zhipin", window) == 1
