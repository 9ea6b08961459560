"""Health check endpoints."""
from fastapi import APIRouter, Depends
from typing import Dict, Any
import psutil
import time

from ...core.config import settings
from ...core.security import verify_api_key
from ...crawler.orchestrator import CrawlOrchestrator
from ..dependencies import get_orchestrator


router = APIRouter()


@router.get("/health/ready", summary="Readiness check")
async def readiness_check(
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Browser session state; the session starts lazily, so "stopped" is still ready."""
    browser = orchestrator.session.health_check()
    return {
        "status": "ready" if browser.browser != "error" else "degraded",
        "timestamp": time.time(),
        "browser": browser.model_dump(mode="json"),
    }


@router.get("/health/detailed", summary="Detailed health check")
async def detailed_health_check(
    api_key: str = Depends(verify_api_key),
    orchestrator: CrawlOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    """Health check with system metrics."""
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')

    cache_stats = orchestrator.cache.get_stats() if hasattr(orchestrator.cache, "get_stats") else {}

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "service": settings.APP_NAME,
        "system": {
            "memory_percent": memory.percent,
            "cpu_percent": psutil.cpu_percent(interval=None),
            "disk_percent": disk.percent
        },
        "browser": orchestrator.session.health_check().model_dump(mode="json"),
        "cache": cache_stats,
        "configuration": {
            "debug": settings.DEBUG,
            "timeout_ms": settings.CRAWLER_TIMEOUT_MS,
            "keywords_per_site": settings.CRAWLER_MAX_KEYWORDS_PER_SITE,
            "sites": orchestrator.registry.site_ids(),
        }
    }
