"""In-memory cache store with TTL, intended for development and tests."""

import copy
import threading
import time
from typing import Any, Callable, Optional

from app.cache_store.base import CacheStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache_store/in_memory_cache_store")


class InMemoryCacheStore(CacheStore):
    """Thread-safe, TTL-aware in-memory store (dev/test)."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the store; ``clock`` returns seconds and is swappable in tests."""
        logger.debug("Initializing InMemoryCacheStore")
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return a copy of the value, or None if missing/expired."""
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            value, exp = item
            if exp <= self._clock():
                self._entries.pop(key, None)
                return None
            return copy.deepcopy(value)

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a copy of ``value``; non-positive TTLs drop the key."""
        with self._lock:
            if ttl_seconds <= 0:
                self._entries.pop(key, None)
                return
            self._entries[key] = (copy.deepcopy(value), self._clock() + ttl_seconds)

    def delete(self, key: str) -> None:
        """Remove a key if it exists."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all keys."""
        with self._lock:
            self._entries.clear()
