"""Request/response middleware."""
import time
import uuid
from fastapi import Request
from ..core.logging import logger


async def add_process_time_header(request: Request, call_next):
    """
    Tag each response with a request id and its processing time.

    Args:
        request: FastAPI request object
        call_next: Next middleware callable

    Returns:
        Response with X-Request-ID and X-Process-Time headers
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    start_time = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception as exc:
        elapsed = time.perf_counter() - start_time
        logger.error(
            f"[{request_id}] {request.method} {request.url.path} "
            f"failed after {elapsed:.3f}s: {exc}"
        )
        raise

    elapsed = time.perf_counter() - start_time
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"
    logger.info(
        f"[{request_id}] {request.method} {request.url.path} "
        f"-> {response.status_code} in {elapsed:.3f}s"
    )
    return response
