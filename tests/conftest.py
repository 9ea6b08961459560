"""Pytest fixtures for crawler tests."""

import tempfile
import shutil
from pathlib import Path
from typing import Generator, Optional

import pytest

from src.talent_harvest.crawler.adapters.base import InterviewSiteAdapter
from src.talent_harvest.crawler.adapters.registry import SiteAdapterRegistry
from src.talent_harvest.crawler.cache import CrawlCache
from src.talent_harvest.crawler.orchestrator import CrawlOrchestrator

from tests.fakes import FakeSession, make_site_config


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for cache files."""
    temp_path = Path(tempfile.mkdtemp(prefix="talent_harvest_test_"))
    yield temp_path
    if temp_path.exists():
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(scope="function")
def crawl_cache(temp_dir: Path) -> CrawlCache:
    return CrawlCache(cache_dir=str(temp_dir / "cache"))


@pytest.fixture(scope="function")
def two_site_registry() -> SiteAdapterRegistry:
    """Registry with two fixture interview sites."""
    return SiteAdapterRegistry([
        InterviewSiteAdapter(make_site_config("sitea")),
        InterviewSiteAdapter(make_site_config("siteb")),
    ])


@pytest.fixture(scope="function")
def make_orchestrator(two_site_registry: SiteAdapterRegistry, crawl_cache: CrawlCache):
    """Factory for an orchestrator with no pacing delays."""

    def factory(session: FakeSession, registry: Optional[SiteAdapterRegistry] = None, cache=None):
        return CrawlOrchestrator(
            session=session,
            registry=registry or two_site_registry,
            cache=cache or crawl_cache,
            inter_site_delay_ms=0,
            batch_delay_ms=0,
        )

    return factory
