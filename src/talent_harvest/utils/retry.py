"""Retry helpers built on tenacity."""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..core.config import settings
from ..core.logging import logger

T = TypeVar("T")


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        min_wait: float = 1.0,
        max_wait: float = 60.0,
        backoff_multiplier: float = 2.0,
        retry_exceptions: Optional[tuple] = None,
        retry_if: Optional[Callable[[BaseException], bool]] = None,
    ):
        self.max_attempts = max_attempts
        self.min_wait = min_wait
        self.max_wait = max_wait
        self.backoff_multiplier = backoff_multiplier
        self.retry_exceptions = retry_exceptions or (Exception,)
        self.retry_if = retry_if

    @classmethod
    def for_navigation(cls, **overrides) -> "RetryConfig":
        """Navigation retry policy from settings."""
        values = dict(
            max_attempts=settings.CRAWLER_NAVIGATION_ATTEMPTS,
            min_wait=settings.CRAWLER_RETRY_MIN_WAIT,
            max_wait=settings.CRAWLER_RETRY_MAX_WAIT,
        )
        values.update(overrides)
        return cls(**values)

    def should_retry(self, exc: BaseException) -> bool:
        if not isinstance(exc, self.retry_exceptions):
            return False
        return self.retry_if(exc) if self.retry_if else True


async def run_with_retry(func: Callable[[], Awaitable[T]], config: RetryConfig) -> T:
    """
    Await ``func`` with exponential backoff.

    Args:
        func: Zero-argument coroutine factory, called once per attempt
        config: Attempts, waits and the exception predicate

    Returns:
        Result of the first successful attempt

    Raises:
        The last exception once attempts are exhausted or the predicate
        rejects it
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(config.max_attempts, 1)),
        wait=wait_exponential(
            multiplier=config.backoff_multiplier,
            min=config.min_wait,
            max=config.max_wait
        ),
        retry=retry_if_exception(config.should_retry),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )

    async def async_func():
        return await func()

    return await retrying(async_func)
