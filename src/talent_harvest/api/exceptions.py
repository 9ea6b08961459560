"""Custom exception handlers."""
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..core.logging import logger
from ..crawler.errors import CrawlerError


async def crawler_exception_handler(request: Request, exc: CrawlerError):
    """Render a crawler error with the status its kind maps to."""
    logger.error(f"Crawler error ({exc.kind.value}) on {request.url.path}: {exc.message}")

    headers = {}
    if exc.retry_after is not None:
        headers["Retry-After"] = str(int(exc.retry_after) + 1)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.message,
            "type": exc.kind.value,
            "details": exc.to_dict(),
        },
        headers=headers or None,
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """Handle HTTP exceptions with proper logging."""
    logger.warning(
        f"HTTP error: {exc.status_code} - {exc.detail} "
        f"({request.method} {request.url.path})"
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "type": "http_error"
        }
    )


# Exception handler registry
exception_handlers = {
    CrawlerError: crawler_exception_handler,
    HTTPException: http_exception_handler,
}
