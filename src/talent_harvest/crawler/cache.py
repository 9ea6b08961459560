"""Caching layer for crawl results."""
import asyncio
import hashlib
import json
import time
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from ..core.config import settings
from ..core.logging import logger
from ..models.records import RecordKind
from ..models.requests import CrawlRequest

KEY_PREFIX = "talent_harvest:"


class CacheBackend(Protocol):
    """Key/value store with per-entry TTL."""

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        ...

    async def delete_pattern(self, prefix: str) -> int:
        ...


def build_cache_key(request: CrawlRequest) -> str:
    """
    Deterministic key for a crawl request.

    Keyword and site order do not matter; ``max_results`` is not part of the
    key because hits are capped on the way out.
    """
    fingerprint = {
        "category": request.category.value,
        "keywords": sorted({kw.lower() for kw in request.keywords}),
        "sites": sorted(set(request.sites)) if request.sites is not None else "*",
    }
    digest = hashlib.sha256(json.dumps(fingerprint, sort_keys=True).encode()).hexdigest()
    return f"{KEY_PREFIX}{request.kind.value}:{digest}"


def job_detail_key(url: str, platform: str) -> str:
    digest = hashlib.sha256(f"{platform}|{url}".encode()).hexdigest()
    return f"{KEY_PREFIX}{RecordKind.JOB.value}:detail:{digest}"


def kind_prefix(kind: Optional[RecordKind] = None) -> str:
    return f"{KEY_PREFIX}{kind.value}:" if kind else KEY_PREFIX


class CrawlCache:
    """
    File-backed cache, one JSON document per key.

    Features:
    - Per-entry TTL
    - Prefix invalidation
    - Expired and corrupt entries removed on read
    """

    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = Path(cache_dir or settings.CACHE_DIR)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

    def _path(self, key: str) -> Path:
        return self.cache_dir / f"{hashlib.sha256(key.encode()).hexdigest()}.json"

    async def get(self, key: str) -> Optional[Any]:
        """
        Retrieve a cached value if present and not expired.

        Read failures are treated as a miss.
        """
        cache_file = self._path(key)
        if not cache_file.exists():
            return None

        try:
            async with self._lock:
                entry = json.loads(cache_file.read_text(encoding="utf-8"))

            if entry["key"] != key:
                return None

            if time.time() >= entry["expires_at"]:
                logger.debug(f"Cache expired for {key}")
                await self._remove(cache_file)
                return None

            logger.debug(f"Cache hit for {key}")
            return entry["value"]

        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Invalid cache file {cache_file}: {e}")
            await self._remove(cache_file)
            return None
        except OSError as e:
            logger.error(f"Failed to read cache entry {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a JSON-serialisable value for ``ttl_seconds``."""
        now = time.time()
        entry = {
            "key": key,
            "cached_at": now,
            "expires_at": now + ttl_seconds,
            "value": value,
        }

        try:
            payload = json.dumps(entry, ensure_ascii=False)
            async with self._lock:
                self._path(key).write_text(payload, encoding="utf-8")
            logger.debug(f"Cached {key} for {ttl_seconds}s")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to cache {key}: {e}")

    async def delete(self, key: str) -> bool:
        cache_file = self._path(key)
        if not cache_file.exists():
            return False
        return await self._remove(cache_file)

    async def delete_pattern(self, prefix: str) -> int:
        """Remove every entry whose key starts with ``prefix``."""
        count = 0
        for cache_file in list(self.cache_dir.glob("*.json")):
            try:
                entry = json.loads(cache_file.read_text(encoding="utf-8"))
                key = entry.get("key", "")
            except (OSError, json.JSONDecodeError, AttributeError):
                key = ""
            if key.startswith(prefix) and await self._remove(cache_file):
                count += 1

        logger.info(f"Removed {count} cache entries with prefix {prefix!r}")
        return count

    async def _remove(self, cache_file: Path) -> bool:
        try:
            async with self._lock:
                cache_file.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to remove cache file {cache_file}: {e}")
            return False

    async def clear_expired(self) -> int:
        """Remove expired and unreadable entries."""
        now = time.time()
        removed = 0
        for cache_file in list(self.cache_dir.glob("*.json")):
            try:
                entry = json.loads(cache_file.read_text(encoding="utf-8"))
                expired = now >= entry["expires_at"]
            except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
                logger.warning(f"Invalid cache file {cache_file}: {e}")
                expired = True

            if expired and await self._remove(cache_file):
                removed += 1

        logger.info(f"Cleared {removed} expired cache entries")
        return removed

    async def clear_all(self) -> int:
        return await self.delete_pattern("")

    def get_stats(self) -> Dict[str, Any]:
        files = list(self.cache_dir.glob("*.json"))
        return {
            "total_entries": len(files),
            "total_size_bytes": sum(f.stat().st_size for f in files),
            "cache_dir": str(self.cache_dir),
        }
