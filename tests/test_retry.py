"""Tests for the tenacity retry helper."""

import pytest

from src.talent_harvest.utils.retry import RetryConfig, run_with_retry


def fast_config(**overrides) -> RetryConfig:
    values = dict(max_attempts=3, min_wait=0, max_wait=0)
    values.update(overrides)
    return RetryConfig(**values)


class Flaky:
    """Fails a set number of times, then succeeds."""

    def __init__(self, failures: int):
        self.failures = failures
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError(f"reset #{self.calls}")
        return "page"


@pytest.mark.asyncio
async def test_lambda_factory_is_awaited_and_retried():
    flaky = Flaky(failures=2)

    result = await run_with_retry(lambda: flaky(), fast_config())

    assert result == "page"
    assert flaky.calls == 3


@pytest.mark.asyncio
async def test_last_error_is_reraised_when_attempts_run_out():
    flaky = Flaky(failures=5)

    with pytest.raises(ConnectionError, match="reset #2"):
        await run_with_retry(flaky, fast_config(max_attempts=2))

    assert flaky.calls == 2


@pytest.mark.asyncio
async def test_predicate_stops_retries():
    flaky = Flaky(failures=5)
    config = fast_config(retry_if=lambda exc: False)

    with pytest.raises(ConnectionError):
        await run_with_retry(flaky, config)

    assert flaky.calls == 1
