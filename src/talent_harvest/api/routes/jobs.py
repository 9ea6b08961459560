"""
Job posting crawling routes.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ...core.logging import logger
from ...core.security import verify_api_key
from ...crawler.adapters.registry import SiteAdapterRegistry
from ...crawler.errors import status_code_for
from ...crawler.orchestrator import CrawlOrchestrator
from ...models.records import RecordKind
from ...models.requests import JobBatchRequest, JobDetailRequest, JobSearchRequest
from ...models.responses import BatchCrawlResponse, JobDetailResponse, SiteInfo
from ..dependencies import get_orchestrator, get_registry
from .interview import envelope_response


router = APIRouter()


@router.post("/crawl", summary="Search job boards")
async def crawl_jobs(
    request: JobSearchRequest,
    api_key: str = Depends(verify_api_key),
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Search the selected job boards and return normalized postings."""
    logger.info(f"Job search requested: {request.category.value} {request.keywords}")
    result = await orchestrator.crawl(request.to_crawl_request())
    return envelope_response(result)


@router.post("/detail", response_model=JobDetailResponse, summary="Crawl one job page")
async def crawl_job_detail(
    request: JobDetailRequest,
    api_key: str = Depends(verify_api_key),
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
):
    """
    Crawl a single job detail page.

    Unknown platforms are read with the generic adapter.
    """
    result = await orchestrator.crawl_job_detail(
        str(request.url), platform=request.platform, category=request.category
    )
    body = JobDetailResponse(
        success=result.success,
        data=result.data,
        error=result.error,
        cached=result.cached,
        processing_time_ms=result.processing_time_ms,
    )
    if result.error is not None:
        return JSONResponse(
            status_code=status_code_for(result.error.kind),
            content=body.model_dump(mode="json"),
        )
    return body


@router.post("/batch", response_model=BatchCrawlResponse, summary="Crawl several job pages")
async def crawl_job_batch(
    request: JobBatchRequest,
    api_key: str = Depends(verify_api_key),
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
) -> BatchCrawlResponse:
    results = await orchestrator.crawl_job_batch(
        [str(url) for url in request.urls],
        platform=request.platform,
        category=request.category,
    )
    succeeded = sum(1 for item in results if item.success)
    return BatchCrawlResponse(
        success=succeeded > 0,
        data=results,
        message=f"Crawled {succeeded} of {len(results)} pages",
        total_urls=len(results),
        successful_urls=succeeded,
        failed_urls=len(results) - succeeded,
    )


@router.get("/platforms", response_model=List[SiteInfo], summary="List job boards")
async def list_platforms(
    registry: SiteAdapterRegistry = Depends(get_registry),
) -> List[Dict[str, Any]]:
    return registry.describe(RecordKind.JOB)
