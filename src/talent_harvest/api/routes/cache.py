"""Cache maintenance routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from ...core.security import verify_api_key
from ...crawler.cache import kind_prefix
from ...crawler.orchestrator import CrawlOrchestrator
from ...models.records import RecordKind
from ...models.responses import CacheInvalidationResponse
from ..dependencies import get_orchestrator


router = APIRouter()


@router.delete("", response_model=CacheInvalidationResponse, summary="Invalidate cached crawls")
async def invalidate_cache(
    kind: Optional[RecordKind] = Query(default=None, description="Only this record kind"),
    api_key: str = Depends(verify_api_key),
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
) -> CacheInvalidationResponse:
    removed = await orchestrator.invalidate(kind)
    return CacheInvalidationResponse(
        removed=removed,
        prefix=kind_prefix(kind),
        message=f"Removed {removed} cached entries",
    )
