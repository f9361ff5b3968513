"""In-memory response cache with a fixed time-to-live."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

logger = logging.getLogger(__name__)

# Default lifetime for cache entries (60 seconds)
DEFAULT_CACHE_LIFETIME = 60.0


def cache_key(method: str, url: str) -> str:
    """Build the cache key for a request, e.g. ``"GET:https://x/y"``."""
    return f"{method}:{url}"


@dataclass(frozen=True)
class CacheEntry:
    """A cached response body and the clock time it was stored at."""

    data: Any
    timestamp: float


class ResponseCache:
    """Cache of decoded response bodies keyed by method and URL.

    Features:
    - TTL support: an entry is stale once ``now - timestamp >= lifetime``
    - Lazy expiry: stale entries are deleted when looked up, never swept

    There is no size bound, so a long-lived client requesting many
    distinct URLs keeps every body until ``clear()`` is called.

    Example:
        cache = ResponseCache(lifetime=30.0)
        cache.set("GET:https://api.example.com/users", [{"id": 1}])

        entry = cache.get("GET:https://api.example.com/users")
        if entry is not None:
            print(entry.data)
    """

    def __init__(
        self,
        lifetime: float = DEFAULT_CACHE_LIFETIME,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            lifetime: Seconds before an entry is considered stale
            clock: Time source, shared with the owning client
        """
        self.lifetime = lifetime
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def is_expired(self, entry: CacheEntry) -> bool:
        """Check whether an entry has outlived the cache lifetime."""
        return self._clock() - entry.timestamp >= self.lifetime

    def get(self, key: str) -> Optional[CacheEntry]:
        """Look up a fresh entry.

        Args:
            key: Cache key (see ``cache_key``)

        Returns:
            The entry if present and fresh, None otherwise. A stale entry
            is removed as a side effect.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self.is_expired(entry):
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None

        return entry

    def set(self, key: str, data: Any) -> CacheEntry:
        """Store data under key, stamped with the current clock time."""
        entry = CacheEntry(data=data, timestamp=self._clock())
        self._entries[key] = entry
        return entry

    def clear(self) -> None:
        """Drop every entry."""
        self._entries = {}

    def get_stats(self) -> dict[str, Union[int, float]]:
        """Get cache statistics."""
        return {
            "entries": len(self._entries),
            "lifetime": self.lifetime,
        }
