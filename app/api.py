"""HTTP API for holidays, weekend suggestions and flight deal search."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Header, HTTPException, Query, Response, status
from pydantic import BaseModel

from app.domain import FlightSearchParams, Holiday, NormalizedDeal, WeekendSuggestion
from app.errors import DataMissing, InvalidArgument, UpstreamUnavailable
from .cache_store import build_cache_store
from .config import settings
from .data_sources import build_holiday_source, build_rate_fetcher, build_search_fetcher
from .flight_search import search_flights
from .leave_hacks import weekend_suggestions
from .search_cache import SearchCacheGate
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()

CACHE = build_cache_store(settings)
SEARCH_GATE = SearchCacheGate(CACHE, ttl_seconds=settings.search_ttl_seconds)
SEARCH_FETCHER = build_search_fetcher(settings)
RATE_FETCHER = build_rate_fetcher(settings)
HOLIDAY_SOURCE = build_holiday_source(settings)


class HealthResponse(BaseModel):
    """Liveness probe payload."""
    ok: bool = True


class HolidaysResponse(BaseModel):
    """Upcoming public holidays."""
    holidays: List[Holiday]


class WeekendsResponse(BaseModel):
    """Upcoming weekends, extended where a holiday allows."""
    weekends: List[WeekendSuggestion]


class SearchResponse(BaseModel):
    """Normalized deals plus whether they came from the cache."""
    deals: List[NormalizedDeal]
    cache_hit: bool


def utc_now() -> datetime:
    """Current instant; the only place the API reads the clock."""
    return datetime.now(timezone.utc)


def _cache_headers(etag: str, max_age: int) -> dict:
    return {"ETag": f'"{etag}"', "Cache-Control": f"max-age={max_age}"}


@router.get("/health", response_model=HealthResponse)
def health():
    """Liveness probe."""
    return HealthResponse()


@router.get("/holidays/sg", response_model=HolidaysResponse)
def list_holidays():
    """Upcoming Singapore public holidays, earliest first."""
    holidays = HOLIDAY_SOURCE.upcoming_holidays(utc_now().date())
    return HolidaysResponse(holidays=holidays)


@router.get("/suggestions/weekends", response_model=WeekendsResponse)
def suggest_weekends(count: int = Query(default=settings.weekend_window_count, ge=0, le=52)):
    """Next ``count`` weekends with leave-hack annotations."""
    now = utc_now()
    holidays = HOLIDAY_SOURCE.holiday_dates(now.date())
    return WeekendsResponse(weekends=weekend_suggestions(now, holidays, window_count=count))


@router.post("/search/flights", response_model=SearchResponse)
def search(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    if_none_match: Optional[str] = Header(default=None),
):
    """Search flights, answering 304 when the client already holds the cached result.

    Malformed search parameters answer 400.
    """
    try:
        params = FlightSearchParams.from_mapping(payload)
        outcome = search_flights(
            params,
            gate=SEARCH_GATE,
            cache=CACHE,
            search_fetcher=SEARCH_FETCHER,
            rate_fetcher=RATE_FETCHER,
            if_none_match=if_none_match,
            fx_ttl_seconds=settings.fx_ttl_seconds,
            max_results=settings.max_results,
        )
    except InvalidArgument as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except (UpstreamUnavailable, DataMissing) as exc:
        logger.warning("Flight search failed upstream", extra={"error": str(exc)})
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))

    headers = _cache_headers(outcome.etag, outcome.max_age)
    if outcome.not_modified:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)
    for name, value in headers.items():
        response.headers[name] = value
    return SearchResponse(deals=outcome.deals, cache_hit=outcome.cache_hit)
