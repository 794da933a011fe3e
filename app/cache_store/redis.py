"""Redis-backed cache store with TTL."""

import json
from datetime import date, datetime
from typing import Any, Optional

from app.cache_store.base import CacheStore
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="cache_store/redis_cache_store")


class RedisCacheStore(CacheStore):
    """Redis-backed cache. Values are stored as JSON with SETEX."""

    def __init__(self, client, prefix: str = "tripz:") -> None:
        """Initialize with a Redis client and a key prefix."""
        logger.debug("Initializing RedisCacheStore")
        self.client = client
        self.prefix = prefix

    def _key(self, key: str) -> str:
        """Return the namespaced Redis key."""
        return f"{self.prefix}{key}"

    @staticmethod
    def _json_default(obj):
        """Provide JSON serialization for dates and pydantic models."""
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if hasattr(obj, "model_dump"):
            return obj.model_dump(mode="json")
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

    def get(self, key: str) -> Optional[Any]:
        """Fetch and decode a value; undecodable payloads read as missing."""
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning("Discarding undecodable cache payload", extra={"key": key, "error": str(exc)})
            return None

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Serialize ``value`` to JSON and write it with an expiry."""
        payload = json.dumps(value, default=self._json_default)
        if ttl_seconds <= 0:
            self.delete(key)
            return
        self.client.setex(self._key(key), int(ttl_seconds), payload)

    def delete(self, key: str) -> None:
        """Delete a key if present."""
        self.client.delete(self._key(key))

    def clear(self) -> None:
        """Delete every key under the configured prefix."""
        for key in self.client.scan_iter(f"{self.prefix}*"):
            self.client.delete(key)
