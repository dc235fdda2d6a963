"""
Cache Manager

In-process TTL cache for provider responses.
Entries expire lazily: an expired entry is evicted when it is next read.
"""
import json
import time
from dataclasses import dataclass
from typing import Optional, Any, Callable
from loguru import logger


DEFAULT_TTL_SECONDS = 300.0  # 5 minutes


@dataclass
class CacheEntry:
    """A cached payload and the time it was stored."""
    key: str
    payload: Any
    stored_at: float

    def is_expired(self, now: float, ttl: float) -> bool:
        return now - self.stored_at > ttl


class ResponseCache:
    """
    TTL cache keyed by operation name and request parameters.

    Features:
    - Deterministic keys independent of parameter ordering
    - Lazy expiry on read
    - Statistics tracking

    There is no size bound and no lock; concurrent writers to the same key
    resolve as last-writer-wins.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Optional[Callable[[], float]] = None,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._entries: dict[str, CacheEntry] = {}
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "evictions": 0,
        }

    @staticmethod
    def make_key(operation: str, params: dict[str, Any]) -> str:
        """Build a cache key from an operation name and its parameters."""
        encoded = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
        return f"{operation}:{encoded}"

    def get(self, key: str) -> Optional[Any]:
        """Get a cached payload, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._stats["misses"] += 1
            return None

        if entry.is_expired(self._clock(), self.ttl_seconds):
            del self._entries[key]
            self._stats["evictions"] += 1
            self._stats["misses"] += 1
            logger.debug(f"Cache entry expired: {key}")
            return None

        self._stats["hits"] += 1
        logger.debug(f"Cache hit: {key}")
        return entry.payload

    def put(self, key: str, payload: Any) -> None:
        """Store a payload, replacing any previous entry."""
        self._entries[key] = CacheEntry(key=key, payload=payload, stored_at=self._clock())
        self._stats["sets"] += 1

    def invalidate(self, key: str) -> bool:
        """Remove a single entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Cleared {count} cache entries")

    def __len__(self) -> int:
        return len(self._entries)

    # ==================== Cache Stats ====================

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        total = self._stats["hits"] + self._stats["misses"]
        hit_rate = self._stats["hits"] / total if total > 0 else 0

        return {
            **self._stats,
            "entries": len(self._entries),
            "ttl_seconds": self.ttl_seconds,
            "total_requests": total,
            "hit_rate": round(hit_rate * 100, 2),
        }

    def reset_stats(self) -> None:
        """Reset cache statistics."""
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "evictions": 0,
        }
