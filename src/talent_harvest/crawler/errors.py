"""
Crawler error taxonomy.

A single exception type carries a kind discriminator plus optional context.
Components raise it; the orchestrator converts it into an ``ErrorDetail``
value at each site boundary.
"""
from enum import Enum
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field


class ErrorKind(str, Enum):
    """Failure categories."""
    TIMEOUT = "timeout"
    NETWORK = "network"
    PARSE = "parse"
    RATE_LIMIT = "rate_limit"
    UNSUPPORTED_SITE = "unsupported_site"
    UNKNOWN = "unknown"


_STATUS_CODES: Dict[ErrorKind, int] = {
    ErrorKind.TIMEOUT: 408,
    ErrorKind.NETWORK: 502,
    ErrorKind.PARSE: 422,
    ErrorKind.RATE_LIMIT: 429,
    ErrorKind.UNSUPPORTED_SITE: 400,
    ErrorKind.UNKNOWN: 500,
}


class ErrorDetail(BaseModel):
    """Structured, serialisable form of a crawler error."""
    kind: ErrorKind
    message: str
    url: Optional[str] = None
    platform: Optional[str] = None
    field: Optional[str] = None
    retry_after: Optional[float] = Field(
        default=None,
        description="Seconds the site asked us to wait"
    )


class CrawlerError(Exception):
    """Base exception for every crawl failure."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        url: Optional[str] = None,
        platform: Optional[str] = None,
        field: Optional[str] = None,
        retry_after: Optional[float] = None,
    ):
        self.kind = kind
        self.message = message
        self.url = url
        self.platform = platform
        self.field = field
        self.retry_after = retry_after
        super().__init__(self.message)

    @classmethod
    def timeout(cls, url: str, timeout_ms: int, platform: Optional[str] = None) -> "CrawlerError":
        return cls(
            ErrorKind.TIMEOUT,
            f"Timeout after {timeout_ms}ms",
            url=url,
            platform=platform,
        )

    @classmethod
    def network(cls, url: str, message: str, platform: Optional[str] = None) -> "CrawlerError":
        return cls(ErrorKind.NETWORK, message, url=url, platform=platform)

    @classmethod
    def parse(cls, url: str, field: str, message: str, platform: Optional[str] = None) -> "CrawlerError":
        return cls(
            ErrorKind.PARSE,
            f"Failed to parse {field}: {message}",
            url=url,
            platform=platform,
            field=field,
        )

    @classmethod
    def rate_limit(cls, platform: str, retry_after: Optional[float] = None, url: Optional[str] = None) -> "CrawlerError":
        message = f"Rate limit exceeded for {platform}"
        if retry_after is not None:
            message += f", retry after {retry_after:.1f}s"
        return cls(
            ErrorKind.RATE_LIMIT,
            message,
            url=url,
            platform=platform,
            retry_after=retry_after,
        )

    @classmethod
    def unsupported_site(cls, site_id: str) -> "CrawlerError":
        return cls(
            ErrorKind.UNSUPPORTED_SITE,
            f"Unsupported site: {site_id}",
            platform=site_id,
        )

    @classmethod
    def unknown(cls, message: str, url: Optional[str] = None, platform: Optional[str] = None) -> "CrawlerError":
        return cls(ErrorKind.UNKNOWN, message, url=url, platform=platform)

    @property
    def status_code(self) -> int:
        """HTTP-style status for the API layer."""
        return status_code_for(self.kind)

    @property
    def retryable(self) -> bool:
        """Only transport-level failures are worth an immediate retry."""
        return self.kind == ErrorKind.NETWORK

    def with_platform(self, platform: str) -> "CrawlerError":
        """Attach a site identifier if the raiser did not know it."""
        if self.platform is None:
            self.platform = platform
        return self

    def to_detail(self) -> ErrorDetail:
        return ErrorDetail(
            kind=self.kind,
            message=self.message,
            url=self.url,
            platform=self.platform,
            field=self.field,
            retry_after=self.retry_after,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_detail().model_dump(mode="json", exclude_none=True)

    def __repr__(self) -> str:
        return f"CrawlerError(kind={self.kind.value!r}, message={self.message!r})"


def status_code_for(kind: ErrorKind) -> int:
    return _STATUS_CODES[kind]
