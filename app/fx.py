"""Currency conversion cache: SGD rates fetched on miss and kept for a day."""
from __future__ import annotations

import datetime as dt
import re
from typing import Optional

from app.app_types import FxRate
from app.cache_store.base import CacheStore
from app.data_sources.base import RateFetcher
from app.domain import SGD
from app.errors import InvalidArgument
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="fx")

FX_TTL_SECONDS = 60 * 60 * 24
_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def fx_cache_key(currency: str) -> str:
    return f"fx:{SGD}:{currency}"


def normalize_currency(currency: str) -> str:
    """Upper-case a currency code, rejecting anything that is not three letters."""
    code = (currency or "").strip().upper()
    if not _CURRENCY_CODE.match(code):
        raise InvalidArgument(f"Invalid currency code: {currency!r}")
    return code


def _read_cached(cache: CacheStore, key: str, now: dt.datetime) -> Optional[FxRate]:
    raw = cache.get(key)
    if not raw:
        return None
    try:
        rate = FxRate.from_cache(raw)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed FX cache entry", extra={"key": key, "error": str(exc)})
        return None
    return rate if rate.is_fresh(now) else None


def get_rate_to_sgd(
    from_currency: str,
    cache: CacheStore,
    fetcher: RateFetcher,
    *,
    ttl_seconds: int = FX_TTL_SECONDS,
    now: dt.datetime | None = None,
) -> FxRate:
    """Return the SGD rate for ``from_currency``, fetching and caching it on a miss.

    SGD short-circuits to a unit rate without touching the cache or the
    fetcher. Fetch failures (UpstreamUnavailable, DataMissing) propagate
    unchanged and are not retried. Two concurrent misses may both fetch; the
    later write simply replaces the earlier one.
    """
    code = normalize_currency(from_currency)
    now = now or dt.datetime.now(dt.timezone.utc)
    if code == SGD:
        return FxRate(from_currency=SGD, rate=1.0, fetched_at=now, ttl_seconds=ttl_seconds)

    key = fx_cache_key(code)
    cached = _read_cached(cache, key, now)
    if cached is not None:
        logger.debug("FX cache hit", extra={"currency": code})
        return cached

    logger.info("FX cache miss; fetching rate", extra={"currency": code})
    rate = FxRate(
        from_currency=code,
        rate=fetcher.fetch_rate_to_sgd(code),
        fetched_at=now,
        ttl_seconds=ttl_seconds,
    )
    cache.put(key, rate.to_cache(), ttl_seconds)
    return rate
