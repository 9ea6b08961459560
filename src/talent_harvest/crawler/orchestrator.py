"""
Crawl orchestration: the single entry point for harvesting records.
"""
import asyncio
import time
from typing import List, NamedTuple, Optional

from pydantic import ValidationError

from ..core.config import settings
from ..core.logging import logger
from ..models.crawl_result import BatchItemResult, CrawlResult, JobDetailResult, PageContent
from ..models.records import (
    Category,
    InterviewQuestion,
    JobPosition,
    NormalizedRecord,
    RecordKind,
)
from ..models.requests import CrawlRequest
from ..pipeline.extraction import ExtractionPipeline
from ..pipeline.vocabulary import CATEGORY_KEYWORDS
from .adapters.base import SiteAdapter
from .adapters.registry import SiteAdapterRegistry, default_registry
from .browser import BrowserSessionManager
from .cache import CacheBackend, CrawlCache, build_cache_key, job_detail_key, kind_prefix
from .errors import CrawlerError, ErrorDetail, ErrorKind
from .rate_limit import SiteRateLimiter


class SiteOutcome(NamedTuple):
    """Records gathered from one site and the error that stopped it, if any."""
    records: List[NormalizedRecord]
    error: Optional[ErrorDetail]


class CrawlOrchestrator:
    """
    Fans a crawl request out over site adapters, sequentially.

    Site failures are contained per site; only a browser that cannot start
    fails the whole request.
    """

    def __init__(
        self,
        session: BrowserSessionManager,
        registry: Optional[SiteAdapterRegistry] = None,
        cache: Optional[CacheBackend] = None,
        pipeline: Optional[ExtractionPipeline] = None,
        rate_limiter: Optional[SiteRateLimiter] = None,
        inter_site_delay_ms: Optional[int] = None,
        keywords_per_site: Optional[int] = None,
        batch_delay_ms: Optional[int] = None,
    ):
        self.session = session
        self.registry = registry or default_registry()
        self.cache = cache if cache is not None else CrawlCache()
        self.pipeline = pipeline or ExtractionPipeline()
        self.rate_limiter = rate_limiter or SiteRateLimiter()
        self.inter_site_delay_ms = (
            settings.CRAWLER_INTER_SITE_DELAY_MS if inter_site_delay_ms is None else inter_site_delay_ms
        )
        self.keywords_per_site = (
            settings.CRAWLER_MAX_KEYWORDS_PER_SITE if keywords_per_site is None else keywords_per_site
        )
        self.batch_delay_ms = (
            settings.CRAWLER_BATCH_DELAY_MS if batch_delay_ms is None else batch_delay_ms
        )

    # ------------------------------------------------------------------
    # Search crawls
    # ------------------------------------------------------------------

    async def crawl(self, request: CrawlRequest) -> CrawlResult:
        """
        Run one crawl request.

        Args:
            request: What to harvest and from where

        Returns:
            CrawlResult; ``success`` is False only when nothing was found
            and something failed
        """
        cache_key = build_cache_key(request)
        cached = await self._load_cached(cache_key, request.kind)
        if cached is not None:
            logger.info(f"Serving {len(cached)} cached {request.kind.value} records")
            return CrawlResult(
                success=True,
                kind=request.kind,
                records=self._cap(cached, request.max_results),
                sites=list(dict.fromkeys(record.source_site for record in cached)),
                cached=True,
            )

        try:
            await self.session.ensure_ready()
        except CrawlerError as e:
            logger.error(f"Cannot crawl, browser unavailable: {e.message}")
            return CrawlResult(success=False, kind=request.kind, error=e.to_detail())

        adapters, rejected = self.registry.adapters_for(request.sites, request.kind)
        per_site_errors = {
            site_id: CrawlerError.unsupported_site(site_id).to_detail() for site_id in rejected
        }

        keywords = self._keywords(request)
        deadline = time.monotonic() + self._budget_seconds(adapters, len(keywords))
        logger.info(
            f"Crawling {request.kind.value}/{request.category.value} on "
            f"{[a.site_id for a in adapters]} with keywords {keywords}"
        )

        collected: List[NormalizedRecord] = []
        for index, adapter in enumerate(adapters):
            if index and self.inter_site_delay_ms > 0:
                await asyncio.sleep(self.inter_site_delay_ms / 1000)

            if time.monotonic() >= deadline:
                per_site_errors[adapter.site_id] = CrawlerError(
                    ErrorKind.TIMEOUT,
                    "Crawl deadline exceeded before site was tried",
                    platform=adapter.site_id,
                ).to_detail()
                continue

            outcome = await self._crawl_site(adapter, request, keywords, deadline)
            collected.extend(outcome.records)
            if outcome.error is not None:
                per_site_errors[adapter.site_id] = outcome.error

        records = self.dedupe(collected)
        if records:
            await self._store(cache_key, records, request.kind)

        result = CrawlResult(
            success=bool(records) or not per_site_errors,
            kind=request.kind,
            records=self._cap(records, request.max_results),
            per_site_errors=per_site_errors,
            sites=[adapter.site_id for adapter in adapters],
        )
        logger.info(
            f"Crawl finished: {len(result.records)} records, "
            f"{len(per_site_errors)} site errors, success={result.success}"
        )
        return result

    async def _crawl_site(
        self,
        adapter: SiteAdapter,
        request: CrawlRequest,
        keywords: List[str],
        deadline: float,
    ) -> SiteOutcome:
        records: List[NormalizedRecord] = []
        parse_errors: List[CrawlerError] = []
        config = adapter.config

        try:
            for keyword in keywords:
                remaining_ms = int((deadline - time.monotonic()) * 1000)
                if remaining_ms <= 0:
                    raise CrawlerError(
                        ErrorKind.TIMEOUT,
                        "Crawl deadline exceeded",
                        platform=adapter.site_id,
                    )

                await self.rate_limiter.acquire(adapter.site_id, config.rate_limit)
                page = await self._navigate(adapter, adapter.search_url(keyword), remaining_ms)

                try:
                    candidates = adapter.extract_candidates(page)
                except CrawlerError as e:
                    if e.kind != ErrorKind.PARSE:
                        raise
                    parse_errors.append(e.with_platform(adapter.site_id))
                    continue

                for candidate in candidates:
                    try:
                        record = self.pipeline.normalize(candidate, request, config.company_pattern)
                    except CrawlerError as e:
                        logger.debug(f"Dropping candidate from {adapter.site_id}: {e.message}")
                        parse_errors.append(e.with_platform(adapter.site_id))
                        continue
                    if record is not None:
                        records.append(record)

        except CrawlerError as e:
            logger.warning(f"Site {adapter.site_id} failed ({e.kind.value}): {e.message}")
            return SiteOutcome(records, e.with_platform(adapter.site_id).to_detail())
        except Exception as e:
            logger.error(f"Unexpected error crawling {adapter.site_id}: {e}", exc_info=True)
            error = CrawlerError.unknown(str(e), platform=adapter.site_id)
            return SiteOutcome(records, error.to_detail())

        if not records and parse_errors:
            return SiteOutcome(records, parse_errors[0].to_detail())

        logger.info(f"Site {adapter.site_id}: {len(records)} records")
        return SiteOutcome(records, None)

    async def _navigate(
        self, adapter: SiteAdapter, url: str, remaining_ms: Optional[int] = None
    ) -> PageContent:
        """
        Navigate with the site's pacing, headers and user agents.

        With ``remaining_ms`` the whole navigation, anti-bot delay and retries
        included, is cut off once the crawl budget runs out.
        """
        config = adapter.config
        timeout_ms = config.timeout_ms if remaining_ms is None else min(config.timeout_ms, remaining_ms)
        navigation = self.session.navigate(
            url,
            timeout_ms=timeout_ms,
            delay_range_ms=config.anti_bot.delay_range_ms,
            headers=dict(config.headers) or None,
            platform=adapter.site_id,
            user_agents=config.anti_bot.user_agents,
        )
        if remaining_ms is None:
            return await navigation
        try:
            return await asyncio.wait_for(navigation, timeout=remaining_ms / 1000)
        except asyncio.TimeoutError as e:
            raise CrawlerError(
                ErrorKind.TIMEOUT,
                "Crawl deadline exceeded during navigation",
                url=url,
                platform=adapter.site_id,
            ) from e

    def _keywords(self, request: CrawlRequest) -> List[str]:
        keywords = list(request.keywords) or list(CATEGORY_KEYWORDS.get(request.category, ()))
        if not keywords:
            keywords = [request.category.value]
        if self.keywords_per_site > 0:
            keywords = keywords[: self.keywords_per_site]
        return keywords

    def _budget_seconds(self, adapters: List[SiteAdapter], keyword_count: int) -> float:
        per_site = [
            keyword_count * (adapter.config.timeout_ms + adapter.config.anti_bot.max_delay_ms)
            for adapter in adapters
        ]
        delays = self.inter_site_delay_ms * max(len(adapters) - 1, 0)
        return (sum(per_site) + delays) / 1000

    @staticmethod
    def dedupe(records: List[NormalizedRecord]) -> List[NormalizedRecord]:
        """Keep the first record per id, preserving discovery order."""
        seen = set()
        unique = []
        for record in records:
            if record.id in seen:
                continue
            seen.add(record.id)
            unique.append(record)
        return unique

    @staticmethod
    def _cap(records: List[NormalizedRecord], max_results: int) -> List[NormalizedRecord]:
        return list(records[:max_results]) if max_results > 0 else list(records)

    # ------------------------------------------------------------------
    # Cache plumbing
    # ------------------------------------------------------------------

    def _ttl(self, kind: RecordKind) -> int:
        return settings.JOB_CACHE_TTL if kind == RecordKind.JOB else settings.INTERVIEW_CACHE_TTL

    async def _load_cached(self, key: str, kind: RecordKind) -> Optional[List[NormalizedRecord]]:
        value = await self.cache.get(key)
        if not value:
            return None

        model = JobPosition if kind == RecordKind.JOB else InterviewQuestion
        try:
            return [model.model_validate(item) for item in value]
        except (ValidationError, TypeError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

    async def _store(self, key: str, records: List[NormalizedRecord], kind: RecordKind) -> None:
        payload = [record.model_dump(mode="json") for record in records]
        await self.cache.set(key, payload, self._ttl(kind))

    async def invalidate(self, kind: Optional[RecordKind] = None) -> int:
        """Drop cached results for one record kind, or all of them."""
        return await self.cache.delete_pattern(kind_prefix(kind))

    # ------------------------------------------------------------------
    # Job detail pages
    # ------------------------------------------------------------------

    async def crawl_job_detail(
        self,
        url: str,
        platform: str = "generic",
        category: Category = Category.BACKEND,
    ) -> JobDetailResult:
        """
        Crawl a single job posting page.

        Unknown platforms fall back to the generic adapter.
        """
        started = time.monotonic()
        adapter = self.registry.job_adapter(platform).for_detail_page()
        key = job_detail_key(url, adapter.site_id)

        def elapsed_ms() -> int:
            return int((time.monotonic() - started) * 1000)

        cached = await self.cache.get(key)
        if cached:
            try:
                return JobDetailResult(
                    url=url,
                    platform=adapter.site_id,
                    success=True,
                    data=JobPosition.model_validate(cached),
                    cached=True,
                    processing_time_ms=elapsed_ms(),
                )
            except ValidationError as e:
                logger.warning(f"Discarding unreadable cache entry {key}: {e}")

        request = CrawlRequest(kind=RecordKind.JOB, category=category, max_results=1)
        try:
            await self.session.ensure_ready()
            await self.rate_limiter.acquire(adapter.site_id, adapter.config.rate_limit)
            page = await self._navigate(adapter, url)
            record = None
            for candidate in adapter.extract_candidates(page):
                record = self.pipeline.normalize(
                    candidate, request, adapter.config.company_pattern, check_relevance=False
                )
                if record is not None:
                    break
            if record is None:
                raise CrawlerError.parse(url, "title", "no job posting found", platform=adapter.site_id)
        except CrawlerError as e:
            logger.warning(f"Job detail crawl failed for {url}: {e.message}")
            return JobDetailResult(
                url=url,
                platform=adapter.site_id,
                success=False,
                error=e.with_platform(adapter.site_id).to_detail(),
                processing_time_ms=elapsed_ms(),
            )

        await self.cache.set(key, record.model_dump(mode="json"), settings.JOB_CACHE_TTL)
        return JobDetailResult(
            url=url,
            platform=adapter.site_id,
            success=True,
            data=record,
            processing_time_ms=elapsed_ms(),
        )

    async def crawl_job_batch(
        self,
        urls: List[str],
        platform: str = "generic",
        category: Category = Category.BACKEND,
    ) -> List[BatchItemResult]:
        """Crawl job pages one after another with a pause in between."""
        results: List[BatchItemResult] = []
        for index, url in enumerate(urls):
            if index and self.batch_delay_ms > 0:
                await asyncio.sleep(self.batch_delay_ms / 1000)

            detail = await self.crawl_job_detail(url, platform, category)
            results.append(BatchItemResult(
                url=url,
                success=detail.success,
                data=detail.data,
                error=detail.error,
            ))

        succeeded = sum(1 for result in results if result.success)
        logger.info(f"Batch job crawl: {succeeded}/{len(urls)} succeeded")
        return results
