"""API key check for the crawl and cache routes."""
import secrets
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from .config import settings
from .logging import logger

api_key_header = APIKeyHeader(name=settings.API_KEY_NAME, auto_error=False)


def verify_api_key(api_key: Optional[str] = Depends(api_key_header)) -> str:
    """
    Reject requests without the configured API key.

    Raises:
        HTTPException: 401 when the header is missing or does not match
    """
    if not api_key:
        logger.warning(f"Request without {settings.API_KEY_NAME} header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing API key",
        )

    if not secrets.compare_digest(api_key.encode(), settings.API_KEY_SECRET.encode()):
        logger.warning(f"Invalid API key attempt: {api_key[:4]}...")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
        )

    return api_key
