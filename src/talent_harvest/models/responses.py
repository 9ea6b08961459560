"""API response schemas."""
from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from ..crawler.errors import ErrorDetail
from .crawl_result import BatchItemResult
from .records import JobPosition


class CategoryInfo(BaseModel):
    """A crawlable category and its default search keywords."""
    id: str
    aliases: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)


class SiteInfo(BaseModel):
    """A registered site."""
    id: str
    name: str
    kind: str
    base_url: str
    searchable: bool


class JobDetailResponse(BaseModel):
    """Response schema for a single job page crawl."""
    success: bool
    data: Optional[JobPosition] = None
    error: Optional[ErrorDetail] = None
    cached: bool = False
    processing_time_ms: int = 0
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class BatchCrawlResponse(BaseModel):
    """Response schema for batch job crawls."""
    success: bool
    data: List[BatchItemResult] = Field(default_factory=list)
    message: str
    total_urls: int
    successful_urls: int
    failed_urls: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CacheInvalidationResponse(BaseModel):
    """Response schema for cache invalidation."""
    success: bool = True
    removed: int
    prefix: str
    message: Optional[str] = None
