"""Registry of site adapters."""
from typing import Dict, Iterable, List, Optional, Tuple

from ...core.logging import logger
from ...models.records import RecordKind
from .base import JobBoardAdapter, SiteAdapter
from .interview_sites import CsdnAdapter, JuejinAdapter, NowcoderAdapter
from .job_boards import (
    FiftyOneJobAdapter,
    GenericJobAdapter,
    LagouAdapter,
    LiepinAdapter,
    ZhipinAdapter,
)


class SiteAdapterRegistry:
    """
    Immutable-after-startup set of adapters keyed by site id.

    Registration order is the default crawl order.
    """

    def __init__(self, adapters: Iterable[SiteAdapter] = ()):
        self._adapters: Dict[str, SiteAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: SiteAdapter) -> None:
        if adapter.site_id in self._adapters:
            raise ValueError(f"Site already registered: {adapter.site_id}")
        self._adapters[adapter.site_id] = adapter

    def get(self, site_id: str) -> Optional[SiteAdapter]:
        return self._adapters.get(site_id)

    def site_ids(self, kind: Optional[RecordKind] = None, searchable_only: bool = False) -> List[str]:
        return [
            adapter.site_id
            for adapter in self._adapters.values()
            if (kind is None or adapter.kind == kind)
            and (not searchable_only or adapter.searchable)
        ]

    def adapters_for(
        self,
        sites: Optional[Iterable[str]],
        kind: RecordKind,
    ) -> Tuple[List[SiteAdapter], List[str]]:
        """
        Resolve a site selection to adapters.

        Args:
            sites: Requested site ids, or None for every searchable site of ``kind``
            kind: Record kind the crawl is after

        Returns:
            (adapters in request order, ids that are unknown or unusable for ``kind``)
        """
        if sites is None:
            ids = self.site_ids(kind, searchable_only=True)
            return [self._adapters[site_id] for site_id in ids], []

        adapters: List[SiteAdapter] = []
        rejected: List[str] = []
        for site_id in dict.fromkeys(sites):
            adapter = self._adapters.get(site_id)
            if adapter is None or adapter.kind != kind or not adapter.searchable:
                logger.warning(f"Ignoring site {site_id!r} for {kind.value} crawl")
                rejected.append(site_id)
                continue
            adapters.append(adapter)
        return adapters, rejected

    def job_adapter(self, platform: str) -> JobBoardAdapter:
        """Job board adapter for a detail page, falling back to ``generic``."""
        adapter = self._adapters.get(platform)
        if not isinstance(adapter, JobBoardAdapter):
            adapter = self._adapters.get("generic")
        if not isinstance(adapter, JobBoardAdapter):
            raise KeyError(f"No job adapter for platform {platform!r}")
        return adapter

    def describe(self, kind: Optional[RecordKind] = None) -> List[Dict[str, object]]:
        return [
            {
                "id": adapter.site_id,
                "name": adapter.name,
                "kind": adapter.kind.value,
                "base_url": adapter.config.base_url,
                "searchable": adapter.searchable,
            }
            for adapter in self._adapters.values()
            if kind is None or adapter.kind == kind
        ]

    def __contains__(self, site_id: str) -> bool:
        return site_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


def default_registry() -> SiteAdapterRegistry:
    """Registry with every built-in site."""
    return SiteAdapterRegistry([
        NowcoderAdapter(),
        CsdnAdapter(),
        JuejinAdapter(),
        ZhipinAdapter(),
        LiepinAdapter(),
        LagouAdapter(),
        FiftyOneJobAdapter(),
        GenericJobAdapter(),
    ])
