"""Main entry point for the Talent Harvest crawler API."""

import os
import uvicorn

from src.talent_harvest.core.config import settings
from src.talent_harvest.core.logging import logger


def main():
    """Run the crawler API server."""
    logger.info(f"Starting {settings.APP_NAME} API server")

    # Dev mode: enable auto-reload (set DEV_MODE=1 or UVICORN_RELOAD=1)
    dev_mode = os.environ.get("DEV_MODE", "0") == "1" or os.environ.get("UVICORN_RELOAD", "0") == "1"

    if dev_mode:
        logger.info("Running in DEV MODE with auto-reload enabled")
        uvicorn.run(
            "src.talent_harvest.api.main:app",
            host="0.0.0.0",
            port=8000,
            reload=True,
            reload_dirs=["src"],
            reload_excludes=["*.log", "*.pyc", "__pycache__", "cache/*", "logs/*"],
            log_level=settings.LOG_LEVEL.lower(),
        )
    else:
        # One worker: the browser session is process-wide
        logger.info("Running in PRODUCTION MODE")
        uvicorn.run(
            "src.talent_harvest.api.main:app",
            host="0.0.0.0",
            port=8000,
            reload=False,
            log_level=settings.LOG_LEVEL.lower(),
        )


if __name__ == "__main__":
    main()
