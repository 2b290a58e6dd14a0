"""
Response cache for the news router.

Entries are whole response payloads keyed by country/limit/query. The
in-memory backend is process-local and keeps no size bound; the key space is
one entry per country and limit, so TTL expiry is the only eviction.
"""

import json
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from shared.app_logging.logger import get_logger

logger = get_logger("news_router.cache")


class ResponseCache(Protocol):
    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        ...

    def put(self, key: str, value: Any, ttl: float) -> None:
        ...


class InMemoryTTLCache:
    """Dict-backed TTL cache with an injectable monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        entry = self._entries.get(key)
        if entry is None:
            return None, False
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None, False
        return value, True

    def put(self, key: str, value: Any, ttl: float) -> None:
        self._entries[key] = (self._clock() + ttl, value)

    def __len__(self) -> int:
        return len(self._entries)


class RedisTTLCache:
    """Same contract backed by Redis, so warm instances share entries."""

    def __init__(self, redis_client, prefix: str = "news-router:"):
        self._redis = redis_client
        self._prefix = prefix

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        raw = self._redis.get(f"{self._prefix}{key}")
        if raw is None:
            return None, False
        try:
            return json.loads(raw), True
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None, False

    def put(self, key: str, value: Any, ttl: float) -> None:
        ok = self._redis.set(f"{self._prefix}{key}", json.dumps(value, default=str), ex=max(1, int(ttl)))
        if not ok:
            logger.warning(f"Cache write failed for {key}")
