from .memory_cache import CacheEntry, InMemoryResponseCache, cache_key

__all__ = ["CacheEntry", "InMemoryResponseCache", "cache_key"]
