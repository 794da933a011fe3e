"""Cache storage backends."""

from .base import CacheStore
from .factory import build_cache_store
from .memory import InMemoryCacheStore
from .redis import RedisCacheStore

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
    "RedisCacheStore",
    "build_cache_store",
]
