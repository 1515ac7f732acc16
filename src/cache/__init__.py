"""In-memory response cache."""

from src.cache.store import CacheStats, EvictionPolicy, LFUPolicy, LRUPolicy, TTLCache

__all__ = ["CacheStats", "EvictionPolicy", "LFUPolicy", "LRUPolicy", "TTLCache"]
