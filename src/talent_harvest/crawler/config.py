"""
Configuration models for site adapters.
"""
from typing import Optional, Dict, Tuple
from urllib.parse import quote
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.config import settings
from ..models.records import RecordKind


class RateLimitWindow(BaseModel):
    """Requests allowed per sliding window."""
    model_config = ConfigDict(frozen=True)

    requests: int = Field(default=10, ge=1)
    window_ms: int = Field(default=60000, ge=1)


class AntiBotPolicy(BaseModel):
    """Randomized pre-request delay and user-agent pool."""
    model_config = ConfigDict(frozen=True)

    min_delay_ms: int = Field(default=1000, ge=0)
    max_delay_ms: int = Field(default=3000, ge=0)
    user_agents: Tuple[str, ...] = Field(
        default_factory=lambda: tuple(settings.CRAWLER_USER_AGENTS)
    )

    @model_validator(mode="after")
    def check_delay_range(self):
        if self.max_delay_ms < self.min_delay_ms:
            raise ValueError("max_delay_ms must be >= min_delay_ms")
        return self

    @property
    def delay_range_ms(self) -> Tuple[int, int]:
        return (self.min_delay_ms, self.max_delay_ms)


class SiteAdapterConfig(BaseModel):
    """
    Immutable description of one supported site.

    ``field_selectors`` maps a field name to CSS selectors in priority order;
    the first selector that yields non-empty text wins. ``item_selectors``
    locate repeated result items on search pages.
    """
    model_config = ConfigDict(frozen=True)

    site_id: str = Field(..., pattern=r"^[a-z0-9_]+$")
    name: str
    kind: RecordKind
    base_url: str
    search_url: Optional[str] = Field(
        default=None,
        description="Template with a {keyword} placeholder"
    )
    search_suffix: str = Field(default="", description="Appended to each keyword")
    item_selectors: Tuple[str, ...] = ()
    field_selectors: Dict[str, Tuple[str, ...]] = Field(default_factory=dict)
    link_selectors: Tuple[str, ...] = ("a[href]",)
    company_pattern: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    rate_limit: RateLimitWindow = Field(default_factory=RateLimitWindow)
    anti_bot: AntiBotPolicy = Field(default_factory=AntiBotPolicy)
    timeout_ms: int = Field(default_factory=lambda: settings.CRAWLER_TIMEOUT_MS, ge=1000)
    max_items: int = Field(default=10, ge=1)

    @field_validator("field_selectors", mode="before")
    @classmethod
    def split_selector_lists(cls, value):
        # "a, b, c" is accepted as shorthand for ("a", "b", "c")
        normalized = {}
        for field, selectors in (value or {}).items():
            if isinstance(selectors, str):
                selectors = [part.strip() for part in selectors.split(",")]
            normalized[field] = tuple(s for s in selectors if s)
        return normalized

    @property
    def searchable(self) -> bool:
        return self.search_url is not None

    def selectors_for(self, field: str) -> Tuple[str, ...]:
        return self.field_selectors.get(field, ())

    def build_search_url(self, keyword: str) -> str:
        if self.search_url is None:
            raise ValueError(f"Site {self.site_id} does not support search")
        term = f"{keyword} {self.search_suffix}".strip()
        return self.search_url.format(keyword=quote(term))
