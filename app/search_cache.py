"""Search result cache gate: content-addressed storage with conditional reads.

The fingerprint of a search request is both the cache key and the ETag handed
to clients. A client that presents the current fingerprint for a live entry
gets a not-modified signal instead of the payload.
"""
from __future__ import annotations

import datetime as dt
import hashlib
import json
from typing import Any, Iterable, Mapping, Optional, Sequence

from pydantic import ValidationError

from app.app_types import CacheLookup
from app.cache_store.base import CacheStore
from app.domain import CachedSearchEntry, CacheStatus, FlightSearchParams, NormalizedDeal
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="search_cache")

SEARCH_TTL_SECONDS = 1800


def canonical_params(params: FlightSearchParams | Mapping[str, Any]) -> dict:
    if isinstance(params, FlightSearchParams):
        return params.canonical()
    return {k: v for k, v in params.items() if v is not None}


def fingerprint(params: FlightSearchParams | Mapping[str, Any]) -> str:
    """SHA-256 hex digest of the parameters encoded as sorted, compact JSON."""
    encoded = json.dumps(canonical_params(params), sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def parse_if_none_match(header: Optional[str]) -> set[str]:
    """Split an If-None-Match header into bare tags (weak prefixes and quotes removed)."""
    if not header:
        return set()
    tags = set()
    for part in header.split(","):
        tag = part.strip()
        if tag.startswith("W/"):
            tag = tag[2:]
        tag = tag.strip('"')
        if tag:
            tags.add(tag)
    return tags


def search_cache_key(fp: str) -> str:
    return f"search:{fp}"


class SearchCacheGate:
    """Deduplicate repeated searches through an external cache store."""

    def __init__(self, store: CacheStore, ttl_seconds: int = SEARCH_TTL_SECONDS) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds

    def get(self, fp: str, *, now: dt.datetime | None = None) -> Optional[CachedSearchEntry]:
        """Return the live entry for ``fp``; expired or undecodable entries read as absent."""
        raw = self.store.get(search_cache_key(fp))
        if raw is None:
            return None
        try:
            entry = CachedSearchEntry.model_validate(raw)
        except ValidationError as exc:
            logger.warning("Discarding malformed search cache entry", extra={"fingerprint": fp, "error": str(exc)})
            return None
        now = now or dt.datetime.now(dt.timezone.utc)
        if entry.is_expired(now):
            return None
        return entry

    def put(
        self,
        fp: str,
        deals: Sequence[NormalizedDeal],
        ttl_seconds: int | None = None,
        *,
        now: dt.datetime | None = None,
    ) -> CachedSearchEntry:
        """Store ``deals`` under ``fp``; an idempotent overwrite."""
        entry = CachedSearchEntry(
            fingerprint=fp,
            payload=list(deals),
            stored_at=now or dt.datetime.now(dt.timezone.utc),
            ttl_seconds=ttl_seconds or self.ttl_seconds,
        )
        self.store.put(search_cache_key(fp), entry.model_dump(mode="json"), entry.ttl_seconds)
        return entry

    def lookup(
        self,
        fp: str,
        if_none_match: Optional[str | Iterable[str]] = None,
        *,
        now: dt.datetime | None = None,
    ) -> CacheLookup:
        """Conditional read: NOT_MODIFIED when the client already holds the live entry's digest."""
        entry = self.get(fp, now=now)
        if entry is None:
            logger.debug("Search cache miss", extra={"fingerprint": fp})
            return CacheLookup(status=CacheStatus.MISS, fingerprint=fp)
        if if_none_match is None or isinstance(if_none_match, str):
            tags = parse_if_none_match(if_none_match)
        else:
            tags = set(if_none_match)
        if entry.fingerprint in tags:
            logger.debug("Search cache not modified", extra={"fingerprint": fp})
            return CacheLookup(status=CacheStatus.NOT_MODIFIED, fingerprint=fp, entry=entry)
        logger.debug("Search cache hit", extra={"fingerprint": fp})
        return CacheLookup(status=CacheStatus.HIT, fingerprint=fp, entry=entry)
