"""
Interview question crawling routes.
"""
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ...core.logging import logger
from ...core.security import verify_api_key
from ...crawler.adapters.registry import SiteAdapterRegistry
from ...crawler.orchestrator import CrawlOrchestrator
from ...models.records import Category, RecordKind
from ...models.requests import CATEGORY_ALIASES, InterviewCrawlRequest
from ...models.responses import CategoryInfo, SiteInfo
from ...pipeline.vocabulary import CATEGORY_KEYWORDS
from ..dependencies import get_orchestrator, get_registry


router = APIRouter()


def envelope_response(result) -> JSONResponse:
    """Serialize a CrawlResult; a request-level failure maps to 503."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE if result.error else status.HTTP_200_OK
    return JSONResponse(status_code=status_code, content=result.to_response())


@router.post(
    "/crawl",
    summary="Crawl interview questions",
    description="Search the selected sites and return normalized, deduplicated questions"
)
async def crawl_interview_questions(
    request: InterviewCrawlRequest,
    api_key: str = Depends(verify_api_key),
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """
    Crawl interview questions.

    - **category**: role family (English id or Chinese alias)
    - **keywords**: optional search terms; category defaults are used otherwise
    - **sites**: optional site ids; every interview site otherwise
    - **max_results**: cap on returned questions, 0 for no cap
    """
    logger.info(f"Interview crawl requested: {request.category.value} {request.keywords}")
    result = await orchestrator.crawl(request.to_crawl_request())
    return envelope_response(result)


@router.get("/categories", response_model=List[CategoryInfo], summary="List categories")
async def list_categories() -> List[CategoryInfo]:
    aliases: Dict[Category, List[str]] = {}
    for alias, category in CATEGORY_ALIASES.items():
        aliases.setdefault(category, []).append(alias)

    return [
        CategoryInfo(
            id=category.value,
            aliases=aliases.get(category, []),
            keywords=list(CATEGORY_KEYWORDS.get(category, ())),
        )
        for category in Category
    ]


@router.get("/sites", response_model=List[SiteInfo], summary="List interview sites")
async def list_sites(
    registry: SiteAdapterRegistry = Depends(get_registry),
) -> List[Dict[str, Any]]:
    return registry.describe(RecordKind.INTERVIEW)
