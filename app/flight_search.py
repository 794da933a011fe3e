"""Search orchestration: cache gate, raw provider fetch, FX lookup, normalization."""
from __future__ import annotations

import datetime as dt
from typing import Optional

from app.app_types import SearchOutcome
from app.cache_store.base import CacheStore
from app.data_sources.base import FlightSearchFetcher, RateFetcher
from app.data_sources.kiwi_client import response_currency, response_results
from app.deals import MAX_RESULTS, normalize
from app.domain import CacheStatus, FlightSearchParams
from app.fx import FX_TTL_SECONDS, get_rate_to_sgd
from app.search_cache import SearchCacheGate, fingerprint
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="flight_search")


def search_flights(
    params: FlightSearchParams,
    *,
    gate: SearchCacheGate,
    cache: CacheStore,
    search_fetcher: FlightSearchFetcher,
    rate_fetcher: RateFetcher,
    if_none_match: Optional[str] = None,
    fx_ttl_seconds: int = FX_TTL_SECONDS,
    max_results: int = MAX_RESULTS,
    now: dt.datetime | None = None,
) -> SearchOutcome:
    """Serve a search from the cache gate, or run the pipeline and cache its result.

    Upstream failures propagate before anything is written, so a failed
    search never leaves a partial or unconverted deal list behind.
    """
    fp = fingerprint(params)
    lookup = gate.lookup(fp, if_none_match, now=now)
    if lookup.status is CacheStatus.NOT_MODIFIED:
        return SearchOutcome(etag=fp, max_age=lookup.entry.ttl_seconds, cache_hit=True, not_modified=True)
    if lookup.status is CacheStatus.HIT:
        return SearchOutcome(etag=fp, max_age=lookup.entry.ttl_seconds, cache_hit=True, deals=lookup.entry.payload)

    raw = search_fetcher.search(params)
    currency = response_currency(raw)
    fx_rate = get_rate_to_sgd(currency, cache, rate_fetcher, ttl_seconds=fx_ttl_seconds, now=now)
    deals = normalize(response_results(raw), fx_rate, source_currency=currency, limit=max_results)
    entry = gate.put(fp, deals, now=now)
    logger.info(
        "Search pipeline complete",
        extra={"origin": params.origin, "destination": params.destination, "deals": len(deals), "currency": currency},
    )
    return SearchOutcome(etag=fp, max_age=entry.ttl_seconds, cache_hit=False, deals=deals)
