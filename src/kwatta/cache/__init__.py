"""Response caching for kwatta."""

from .store import DEFAULT_CACHE_LIFETIME, CacheEntry, ResponseCache, cache_key

__all__ = [
    "CacheEntry",
    "ResponseCache",
    "cache_key",
    "DEFAULT_CACHE_LIFETIME",
]
