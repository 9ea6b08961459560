"""Data models for crawl results."""
from typing import Optional, Dict, List, Any, Union
from datetime import datetime
from pydantic import BaseModel, Field

from ..crawler.errors import ErrorDetail
from .records import InterviewQuestion, JobPosition, RecordKind, utc_now


class PageContent(BaseModel):
    """What one navigation hands back to the adapters."""
    url: str = Field(..., description="Final URL of the page")
    html: str = Field(default="", description="Rendered HTML")
    text: str = Field(default="", description="Rendered text or markdown")
    status_code: Optional[int] = Field(default=None, description="HTTP status")
    fetched_at: datetime = Field(default_factory=utc_now, description="When navigation completed")


class CrawlResult(BaseModel):
    """Outcome of one crawl request."""
    success: bool = Field(default=False, description="Records found or nothing failed")
    kind: RecordKind = Field(default=RecordKind.INTERVIEW, description="Record kind requested")
    records: List[Union[InterviewQuestion, JobPosition]] = Field(
        default_factory=list,
        description="Deduplicated records in discovery order"
    )
    per_site_errors: Dict[str, ErrorDetail] = Field(
        default_factory=dict,
        description="Errors keyed by site identifier"
    )
    error: Optional[ErrorDetail] = Field(
        default=None,
        description="Request-level failure when no site could be tried"
    )
    sites: List[str] = Field(default_factory=list, description="Sites attempted, in order")
    cached: bool = Field(default=False, description="Served from cache")
    timestamp: datetime = Field(default_factory=utc_now, description="When the result was built")

    @property
    def partial(self) -> bool:
        return bool(self.records) and bool(self.per_site_errors)

    def to_response(self) -> Dict[str, Any]:
        """Render the JSON envelope returned to API callers."""
        records = [record.model_dump(mode="json") for record in self.records]
        response: Dict[str, Any] = {
            "success": self.success,
            "timestamp": int(self.timestamp.timestamp() * 1000),
            "cached": self.cached,
            "total": len(records),
        }

        if self.kind == RecordKind.INTERVIEW:
            response["questions"] = records
            response["source"] = self.sites
        else:
            response["data"] = records
            response["platform"] = self.sites

        if self.error is not None:
            response["error"] = self.error.message
        elif not self.success and self.per_site_errors:
            response["error"] = "All sites failed"

        if self.per_site_errors:
            response["errors"] = {
                site: detail.model_dump(mode="json", exclude_none=True)
                for site, detail in self.per_site_errors.items()
            }

        return response


class JobDetailResult(BaseModel):
    """Result of crawling a single job detail page."""
    url: str
    platform: str
    success: bool = False
    data: Optional[JobPosition] = None
    error: Optional[ErrorDetail] = None
    cached: bool = False
    processing_time_ms: int = 0
    timestamp: datetime = Field(default_factory=utc_now)


class BatchItemResult(BaseModel):
    """One entry of a batch job crawl."""
    url: str
    success: bool
    data: Optional[JobPosition] = None
    error: Optional[ErrorDetail] = None


class HealthStatus(BaseModel):
    """Browser session health."""
    status: str = Field(..., description="healthy or unhealthy")
    browser: str = Field(..., description="running, stopped or error")
    restarts: int = 0
    consecutive_failures: int = 0
    uptime_seconds: float = 0.0
    last_check: datetime = Field(default_factory=utc_now)
    error: Optional[str] = None
