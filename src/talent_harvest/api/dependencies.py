"""FastAPI dependencies."""
from typing import Optional

from ..core.logging import logger
from ..crawler.adapters.registry import SiteAdapterRegistry, default_registry
from ..crawler.browser import BrowserSessionManager
from ..crawler.cache import CrawlCache
from ..crawler.orchestrator import CrawlOrchestrator

_registry: Optional[SiteAdapterRegistry] = None
_session: Optional[BrowserSessionManager] = None
_orchestrator: Optional[CrawlOrchestrator] = None


def get_registry() -> SiteAdapterRegistry:
    global _registry
    if _registry is None:
        _registry = default_registry()
    return _registry


def get_browser_session() -> BrowserSessionManager:
    """Process-wide browser session, created on first use."""
    global _session
    if _session is None:
        _session = BrowserSessionManager()
    return _session


def get_orchestrator() -> CrawlOrchestrator:
    """Process-wide orchestrator bound to the shared session."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = CrawlOrchestrator(
            session=get_browser_session(),
            registry=get_registry(),
            cache=CrawlCache(),
        )
    return _orchestrator


async def shutdown_crawler() -> None:
    """Release the browser session if one was started."""
    global _orchestrator, _session
    if _session is not None:
        logger.info("Releasing browser session")
        await _session.cleanup()
    _session = None
    _orchestrator = None
