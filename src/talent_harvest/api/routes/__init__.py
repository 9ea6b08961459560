"""API route handlers."""

from . import (
    cache,
    health,
    interview,
    jobs,
)

__all__ = [
    "cache",
    "health",
    "interview",
    "jobs",
]
