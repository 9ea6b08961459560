"""
Headless browser session shared by every crawl in the process.

Wraps a single crawl4ai ``AsyncWebCrawler``. Navigation is serialized, every
navigation is bounded by a timeout, and the session is recreated once after
repeated consecutive failures.
"""
import asyncio
import random
import time
from typing import Dict, List, Optional, Sequence, Tuple

from crawl4ai import AsyncWebCrawler, BrowserConfig, CrawlerRunConfig, CacheMode

from ..core.config import settings
from ..core.logging import logger
from ..models.crawl_result import HealthStatus, PageContent
from ..utils.retry import RetryConfig, run_with_retry
from .errors import CrawlerError, ErrorKind

STEALTH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-infobars",
]

RATE_LIMIT_STATUSES = (403, 429)


class BrowserSessionManager:
    """
    Owns the process-wide browsing session.

    Features:
    - Lazy, idempotent start that is safe under concurrent callers
    - One navigation in flight at a time
    - User-agent rotation, navigator overrides and randomized pre-request delay
    - Bounded retries for transient network failures
    - Single restart after repeated consecutive failures
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        user_agents: Optional[List[str]] = None,
        timeout_ms: Optional[int] = None,
        max_consecutive_failures: Optional[int] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        self.browser_config = BrowserConfig(
            headless=settings.CRAWLER_HEADLESS if headless is None else headless,
            browser_type="chromium",
            viewport_width=settings.CRAWLER_VIEWPORT_WIDTH,
            viewport_height=settings.CRAWLER_VIEWPORT_HEIGHT,
            ignore_https_errors=True,
            extra_args=list(STEALTH_ARGS),
            verbose=settings.LOG_LEVEL == "DEBUG",
        )
        self.user_agents = list(user_agents or settings.CRAWLER_USER_AGENTS)
        self.timeout_ms = timeout_ms or settings.CRAWLER_TIMEOUT_MS
        self.max_consecutive_failures = (
            max_consecutive_failures or settings.CRAWLER_MAX_CONSECUTIVE_FAILURES
        )
        self.retry_config = retry_config or RetryConfig.for_navigation()
        if self.retry_config.retry_if is None:
            self.retry_config.retry_if = _is_transient

        self._crawler: Optional[AsyncWebCrawler] = None
        self._init_lock = asyncio.Lock()
        self._navigate_lock = asyncio.Lock()
        self._consecutive_failures = 0
        self._restarted_in_streak = False
        self._restarts = 0
        self._started_at: Optional[float] = None
        self._last_error: Optional[str] = None
        self._request_headers: Dict[str, str] = {}

    async def __aenter__(self):
        await self.ensure_ready()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()

    @property
    def is_ready(self) -> bool:
        return self._crawler is not None

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def restarts(self) -> int:
        return self._restarts

    async def ensure_ready(self) -> None:
        """
        Start the browser if it is not running.

        Raises:
            CrawlerError: ``unknown`` kind if the browser cannot be started
        """
        if self._crawler is not None:
            return

        async with self._init_lock:
            if self._crawler is not None:
                return
            await self._start()

    async def _start(self) -> None:
        logger.info("Starting browser session")
        crawler = AsyncWebCrawler(config=self.browser_config)
        crawler.crawler_strategy.set_hook("before_goto", self._before_goto)
        try:
            await crawler.start()
        except Exception as e:
            self._last_error = str(e)
            logger.error(f"Failed to start browser session: {e}")
            raise CrawlerError.unknown(f"Failed to initialize browser session: {e}") from e

        self._crawler = crawler
        self._started_at = time.monotonic()
        self._last_error = None

    async def _close(self) -> None:
        crawler, self._crawler = self._crawler, None
        self._started_at = None
        if crawler is None:
            return
        try:
            await crawler.close()
        except Exception as e:
            logger.error(f"Error closing browser session: {e}")

    async def _restart(self) -> None:
        logger.warning(
            f"{self._consecutive_failures} consecutive navigation failures, restarting browser session"
        )
        async with self._init_lock:
            await self._close()
            self._restarts += 1
            try:
                await self._start()
            except CrawlerError as e:
                logger.error(f"Browser restart failed: {e.message}")

    async def cleanup(self) -> None:
        """Release the browser. Safe to call more than once."""
        async with self._init_lock:
            if self._crawler is not None:
                logger.info("Closing browser session")
            await self._close()

    async def navigate(
        self,
        url: str,
        timeout_ms: Optional[int] = None,
        delay_range_ms: Optional[Tuple[int, int]] = None,
        headers: Optional[Dict[str, str]] = None,
        platform: Optional[str] = None,
        user_agents: Optional[Sequence[str]] = None,
    ) -> PageContent:
        """
        Load a page and return its rendered content.

        Args:
            url: Page to load
            timeout_ms: Ready-state deadline, defaults to the session timeout
            delay_range_ms: Random pre-request delay bounds
            headers: Extra request headers for this site
            platform: Site id used in error context
            user_agents: Site user-agent pool, defaults to the session pool

        Returns:
            PageContent with HTML, text and status

        Raises:
            CrawlerError: ``timeout``, ``network``, ``rate_limit`` or ``unknown``
        """
        await self.ensure_ready()
        timeout_ms = timeout_ms or self.timeout_ms

        async with self._navigate_lock:
            try:
                page = await run_with_retry(
                    lambda: self._navigate_once(
                        url, timeout_ms, delay_range_ms, headers, platform, user_agents
                    ),
                    self.retry_config,
                )
            except CrawlerError as e:
                await self._record_failure(e)
                raise
            except Exception as e:
                error = CrawlerError.unknown(str(e), url=url, platform=platform)
                await self._record_failure(error)
                raise error from e

            self._consecutive_failures = 0
            self._restarted_in_streak = False
            return page

    async def _record_failure(self, error: CrawlerError) -> None:
        self._consecutive_failures += 1
        self._last_error = error.message
        logger.warning(
            f"Navigation failed ({error.kind.value}) for {error.url}: {error.message}"
        )
        if (
            self._consecutive_failures >= self.max_consecutive_failures
            and not self._restarted_in_streak
        ):
            self._restarted_in_streak = True
            await self._restart()

    async def _navigate_once(
        self,
        url: str,
        timeout_ms: int,
        delay_range_ms: Optional[Tuple[int, int]],
        headers: Optional[Dict[str, str]],
        platform: Optional[str],
        user_agents: Optional[Sequence[str]],
    ) -> PageContent:
        crawler = self._crawler
        if crawler is None:
            raise CrawlerError.unknown("Browser session is not running", url=url, platform=platform)

        await self._anti_bot_delay(delay_range_ms)
        # Read by the before_goto hook; replaced on every navigation
        self._request_headers = dict(headers or {})

        logger.debug(f"Navigating to {url}")
        try:
            result = await asyncio.wait_for(
                crawler.arun(url=url, config=self._run_config(timeout_ms, user_agents)),
                timeout=timeout_ms / 1000,
            )
        except asyncio.TimeoutError as e:
            raise CrawlerError.timeout(url, timeout_ms, platform=platform) from e
        except CrawlerError:
            raise
        except Exception as e:
            if "timeout" in str(e).lower():
                raise CrawlerError.timeout(url, timeout_ms, platform=platform) from e
            raise CrawlerError.network(url, str(e), platform=platform) from e

        return self._to_page(url, result, timeout_ms, platform)

    def _run_config(self, timeout_ms: int, user_agents: Optional[Sequence[str]] = None) -> CrawlerRunConfig:
        return CrawlerRunConfig(
            cache_mode=CacheMode.BYPASS,
            wait_until="domcontentloaded",
            page_timeout=timeout_ms,
            user_agent=random.choice(list(user_agents or self.user_agents)),
            override_navigator=True,
            verbose=settings.LOG_LEVEL == "DEBUG",
        )

    async def _before_goto(self, page, context=None, url=None, **kwargs):
        await page.set_extra_http_headers(self._request_headers)
        return page

    async def _anti_bot_delay(self, delay_range_ms: Optional[Tuple[int, int]]) -> None:
        if not delay_range_ms:
            return
        low, high = delay_range_ms
        if high <= 0:
            return
        await asyncio.sleep(random.uniform(low, high) / 1000)

    def _to_page(self, url: str, result, timeout_ms: int, platform: Optional[str]) -> PageContent:
        status = result.status_code
        if status in RATE_LIMIT_STATUSES:
            raise CrawlerError.rate_limit(
                platform or url,
                retry_after=_retry_after(result.response_headers),
                url=url,
            )

        if not result.success or (status is not None and status >= 500):
            message = result.error_message or f"HTTP {status}"
            if "timeout" in message.lower():
                raise CrawlerError.timeout(url, timeout_ms, platform=platform)
            raise CrawlerError.network(url, message, platform=platform)

        return PageContent(
            url=url,
            html=result.html or "",
            text=str(result.markdown or ""),
            status_code=status,
        )

    def health_check(self) -> HealthStatus:
        """Snapshot of session state."""
        if self._crawler is not None:
            browser = "running"
        elif self._last_error:
            browser = "error"
        else:
            browser = "stopped"

        uptime = time.monotonic() - self._started_at if self._started_at else 0.0
        return HealthStatus(
            status="healthy" if self._crawler is not None else "unhealthy",
            browser=browser,
            restarts=self._restarts,
            consecutive_failures=self._consecutive_failures,
            uptime_seconds=round(uptime, 3),
            error=self._last_error,
        )


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, CrawlerError) and exc.kind == ErrorKind.NETWORK


def _retry_after(headers) -> Optional[float]:
    if not isinstance(headers, dict):
        return None
    for key, value in headers.items():
        if key.lower() == "retry-after":
            try:
                return float(value)
            except (TypeError, ValueError):
                return None
    return None
