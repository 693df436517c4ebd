"""Cache module for zh."""

from zh.cache.store import CacheKey, CacheStore

__all__ = [
    "CacheKey",
    "CacheStore",
]
