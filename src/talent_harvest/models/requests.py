"""API request schemas."""
from typing import List, Optional
from pydantic import BaseModel, Field, HttpUrl, field_validator

from ..core.config import settings
from .records import Category, RecordKind


# Category names used by the Chinese sites' own navigation
CATEGORY_ALIASES = {
    "前端开发": Category.FRONTEND,
    "后端开发": Category.BACKEND,
    "算法岗": Category.ALGORITHM,
    "测试开发": Category.TESTING,
    "运维开发": Category.DEVOPS,
    "产品经理": Category.PRODUCT,
    "数据分析": Category.DATA,
}


def resolve_category(value):
    """Accept enum values in any case as well as the Chinese aliases."""
    if isinstance(value, str):
        stripped = value.strip()
        if stripped in CATEGORY_ALIASES:
            return CATEGORY_ALIASES[stripped]
        return stripped.lower()
    return value


class CrawlRequest(BaseModel):
    """
    A single crawl across one or more sites.

    ``sites=None`` selects every searchable site registered for ``kind``.
    ``max_results=0`` lifts the cap entirely.
    """
    kind: RecordKind = Field(default=RecordKind.INTERVIEW, description="Record kind to harvest")
    category: Category = Field(..., description="Role family")
    keywords: List[str] = Field(default_factory=list, description="Search keywords, in priority order")
    sites: Optional[List[str]] = Field(default=None, description="Site identifiers")
    max_results: int = Field(
        default_factory=lambda: settings.DEFAULT_MAX_RESULTS,
        ge=0,
        description="Maximum records returned, 0 for no cap"
    )

    @field_validator("category", mode="before")
    @classmethod
    def resolve_category_alias(cls, value):
        return resolve_category(value)

    @field_validator("keywords")
    @classmethod
    def drop_blank_keywords(cls, value: List[str]) -> List[str]:
        return [keyword.strip() for keyword in value if keyword and keyword.strip()]

    @field_validator("sites")
    @classmethod
    def normalize_sites(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return None
        return [site.strip().lower() for site in value if site and site.strip()]


class InterviewCrawlRequest(BaseModel):
    """Request body for interview question crawls."""
    category: Category
    keywords: List[str] = Field(default_factory=list, max_length=10)
    sites: Optional[List[str]] = None
    max_results: int = Field(default=20, ge=0, le=200)

    @field_validator("category", mode="before")
    @classmethod
    def resolve_category_alias(cls, value):
        return resolve_category(value)

    def to_crawl_request(self) -> CrawlRequest:
        return CrawlRequest(
            kind=RecordKind.INTERVIEW,
            category=self.category,
            keywords=self.keywords,
            sites=self.sites,
            max_results=self.max_results,
        )


class JobSearchRequest(BaseModel):
    """Request body for job-board searches."""
    category: Category
    keywords: List[str] = Field(default_factory=list, max_length=10)
    platforms: Optional[List[str]] = None
    max_results: int = Field(default=20, ge=0, le=200)

    @field_validator("category", mode="before")
    @classmethod
    def resolve_category_alias(cls, value):
        return resolve_category(value)

    def to_crawl_request(self) -> CrawlRequest:
        return CrawlRequest(
            kind=RecordKind.JOB,
            category=self.category,
            keywords=self.keywords,
            sites=self.platforms,
            max_results=self.max_results,
        )


class JobDetailRequest(BaseModel):
    """Request body for a single job page."""
    url: HttpUrl = Field(..., description="Job detail page")
    platform: str = Field(default="generic", description="Job board identifier")
    category: Category = Category.BACKEND


class JobBatchRequest(BaseModel):
    """Request body for several job pages on one board."""
    urls: List[HttpUrl] = Field(..., min_length=1, max_length=settings.CRAWLER_MAX_BATCH_URLS)
    platform: str = Field(default="generic")
    category: Category = Category.BACKEND
