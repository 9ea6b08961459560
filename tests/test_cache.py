"""Tests for the crawl cache."""

import time

import pytest

from src.talent_harvest.crawler.cache import (
    CrawlCache,
    build_cache_key,
    job_detail_key,
    kind_prefix,
)
from src.talent_harvest.models.records import RecordKind
from src.talent_harvest.models.requests import CrawlRequest


def test_cache_key_ignores_order_case_and_cap():
    a = CrawlRequest(category="backend", keywords=["Redis", "cache"], sites=["sitea", "siteb"])
    b = CrawlRequest(category="后端开发", keywords=["cache", "redis"], sites=["SiteB", "sitea"], max_results=0)

    assert build_cache_key(a) == build_cache_key(b)
    assert build_cache_key(a).startswith("talent_harvest:interview:")


def test_cache_key_distinguishes_site_selection_and_kind():
    all_sites = CrawlRequest(category="backend", keywords=["redis"])
    one_site = CrawlRequest(category="backend", keywords=["redis"], sites=["sitea"])
    jobs = CrawlRequest(kind=RecordKind.JOB, category="backend", keywords=["redis"])

    assert build_cache_key(all_sites) != build_cache_key(one_site)
    assert build_cache_key(jobs).startswith(kind_prefix(RecordKind.JOB))
    assert job_detail_key("https://a.test/1", "generic").startswith("talent_harvest:job:detail:")


@pytest.mark.asyncio
async def test_set_then_get(crawl_cache: CrawlCache):
    await crawl_cache.set("talent_harvest:interview:k", [{"id": "a"}], ttl_seconds=60)

    assert await crawl_cache.get("talent_harvest:interview:k") == [{"id": "a"}]
    assert await crawl_cache.get("talent_harvest:interview:missing") is None


@pytest.mark.asyncio
async def test_expired_entry_is_a_miss_and_removed(crawl_cache: CrawlCache):
    await crawl_cache.set("talent_harvest:interview:old", [1], ttl_seconds=0)

    assert await crawl_cache.get("talent_harvest:interview:old") is None
    assert crawl_cache.get_stats()["total_entries"] == 0


@pytest.mark.asyncio
async def test_corrupt_entry_is_a_miss(crawl_cache: CrawlCache):
    key = "talent_harvest:interview:broken"
    await crawl_cache.set(key, [1], ttl_seconds=60)
    crawl_cache._path(key).write_text("{not json", encoding="utf-8")

    assert await crawl_cache.get(key) is None
    assert not crawl_cache._path(key).exists()


@pytest.mark.asyncio
async def test_delete_pattern_and_clear_expired(crawl_cache: CrawlCache):
    await crawl_cache.set("talent_harvest:interview:a", 1, ttl_seconds=60)
    await crawl_cache.set("talent_harvest:interview:b", 2, ttl_seconds=60)
    await crawl_cache.set("talent_harvest:job:c", 3, ttl_seconds=0)

    assert await crawl_cache.delete_pattern(kind_prefix(RecordKind.INTERVIEW)) == 2
    assert await crawl_cache.clear_expired() == 1
    assert crawl_cache.get_stats()["total_entries"] == 0


@pytest.mark.asyncio
async def test_unserialisable_value_is_not_cached(crawl_cache: CrawlCache):
    await crawl_cache.set("talent_harvest:interview:bad", {"when": time}, ttl_seconds=60)

    assert await crawl_cache.get("talent_harvest:interview:bad") is None
