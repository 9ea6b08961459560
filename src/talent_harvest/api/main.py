"""
FastAPI application for the interview and job crawling API.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
from contextlib import asynccontextmanager

from ..core.config import settings
from ..core.logging import logger
from .dependencies import shutdown_crawler
from .exceptions import exception_handlers
from .middleware import add_process_time_header
from .routes import cache, health, interview, jobs


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    logger.info(f"Starting {settings.APP_NAME}")
    yield
    logger.info(f"Shutting down {settings.APP_NAME}")
    await shutdown_crawler()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Interview question and job posting harvester built on Crawl4AI",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    exception_handlers=exception_handlers,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add custom middleware
app.middleware("http")(add_process_time_header)


# Include routers
app.include_router(
    interview.router,
    prefix=f"{settings.API_V1_PREFIX}/interview",
    tags=["interview"]
)

app.include_router(
    jobs.router,
    prefix=f"{settings.API_V1_PREFIX}/jobs",
    tags=["jobs"]
)

app.include_router(
    cache.router,
    prefix=f"{settings.API_V1_PREFIX}/cache",
    tags=["cache"]
)

app.include_router(
    health.router,
    prefix=settings.API_V1_PREFIX,
    tags=["health"]
)


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION
    }


# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Interview question and job posting harvester",
        "docs": "/docs",
        "health": "/health"
    }


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "type": "internal_error"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.talent_harvest.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
