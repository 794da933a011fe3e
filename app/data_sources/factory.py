"""Factory helpers for wiring external collaborators at startup."""

from __future__ import annotations

from functools import partial

from app import config
from app.data_sources.base import (
    CallableFlightSearchFetcher,
    CallableRateFetcher,
    FlightSearchFetcher,
    HolidaySource,
    RateFetcher,
)
from app.data_sources.frankfurter_client import fetch_rate_to_sgd
from app.data_sources.kiwi_client import search_flights_raw
from utils.logging_utils import get_tagged_logger, mask_url

logger = get_tagged_logger(__name__, tag="data_sources/factory")


def build_rate_fetcher(settings: config.Settings | None = None) -> RateFetcher:
    """Frankfurter-backed rate fetcher bound to the configured base URL."""
    settings = settings or config.settings
    logger.info("Using Frankfurter FX source", extra={"api_base": settings.fx_api_base})
    return CallableRateFetcher(
        rate_to_sgd=partial(
            fetch_rate_to_sgd,
            api_base=settings.fx_api_base,
            timeout=settings.http_timeout_seconds,
        )
    )


def build_search_fetcher(settings: config.Settings | None = None) -> FlightSearchFetcher:
    """Kiwi-backed search fetcher bound to the configured credentials."""
    settings = settings or config.settings
    if not settings.flight_api_key:
        logger.warning("No flight API key configured; Kiwi searches will be rejected upstream")
    return CallableFlightSearchFetcher(
        search_raw=partial(
            search_flights_raw,
            api_base=settings.flight_api_base,
            api_key=settings.flight_api_key,
            timeout=settings.http_timeout_seconds,
        )
    )


def build_holiday_source(settings: config.Settings | None = None) -> HolidaySource:
    """SQL holiday source for the configured database."""
    settings = settings or config.settings
    db_url = settings.holiday_database_url
    if not db_url:
        raise ValueError("holiday_database_url must be set for the holiday source")
    from .holiday_source import SqlHolidaySource

    logger.info("Using SQL holiday source", extra={"db_url": mask_url(db_url)})
    return SqlHolidaySource.from_url(db_url)
