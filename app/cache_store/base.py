"""Shared protocol for key/value cache backends."""

from typing import Any, Optional, Protocol


class CacheStore(Protocol):
    """Protocol for cache backends holding JSON-compatible values with a TTL."""

    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if missing or expired."""

    def put(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Delete a key without raising if it is absent."""

    def clear(self) -> None:
        """Clear all stored keys."""
