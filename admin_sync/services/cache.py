"""In-memory response cache: per-entry TTL with lazy expiry and substring-based invalidation."""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Five minutes; correctness relies on a short TTL, not on capacity control.
DEFAULT_TTL_SECONDS = 300.0


def make_cache_key(resource: str, **params: Any) -> str:
    """
    Build a deterministic key for a read query.

    Parameters are serialized with sorted keys, so identical logical queries collide and
    distinct ones never do: make_cache_key("users", page=1, search="") == 'users:{"page": 1, "search": ""}'.
    """
    return f"{resource}:{json.dumps(params, sort_keys=True, default=str)}"


class CacheEntry:
    """Single cached payload and the time it was stored."""

    __slots__ = ("value", "created_at")

    def __init__(self, value: Any, created_at: float) -> None:
        self.value = value
        self.created_at = created_at

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.created_at > ttl_seconds


class ResponseCache:
    """
    Key -> payload store with no knowledge of domain types.

    No size bound and no background sweep: an expired entry is evicted by the get() that finds it.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def get(self, key: str, default: Any = None) -> Any:
        """
        Return the cached value, or `default` on a miss or an expired entry.

        Values are opaque, None included; pass a sentinel as `default` to tell a stored None from a miss.
        """
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return default
        if entry.is_expired(self._clock(), self._ttl_seconds):
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return default
        logger.debug("Cache hit: %s", key)
        return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous entry and restarting its TTL."""
        self._entries[key] = CacheEntry(value, self._clock())

    def invalidate(self, pattern: str | None = None) -> int:
        """
        Remove entries. With no pattern everything is cleared; otherwise every key containing
        the pattern as a substring is removed. Returns the number of entries removed.
        """
        if not pattern:
            removed = len(self._entries)
            self._entries.clear()
        else:
            doomed = [key for key in self._entries if pattern in key]
            for key in doomed:
                del self._entries[key]
            removed = len(doomed)
        logger.debug("Cache invalidated: pattern=%r removed=%s", pattern, removed)
        return removed

    def stats(self) -> dict:
        """Return diagnostics: entry count and keys (expired-but-unread entries included)."""
        return {
            "count": len(self._entries),
            "keys": list(self._entries),
        }
