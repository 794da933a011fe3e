"""External collaborators: flight search, FX rates and the holiday calendar."""

from .base import (
    CallableFlightSearchFetcher,
    CallableRateFetcher,
    FlightSearchFetcher,
    HolidaySource,
    RateFetcher,
)
from .factory import build_holiday_source, build_rate_fetcher, build_search_fetcher
from .frankfurter_client import fetch_rate_to_sgd
from .holiday_source import SqlHolidaySource
from .kiwi_client import search_flights_raw

__all__ = [
    "build_holiday_source",
    "build_rate_fetcher",
    "build_search_fetcher",
    "CallableFlightSearchFetcher",
    "CallableRateFetcher",
    "FlightSearchFetcher",
    "HolidaySource",
    "RateFetcher",
    "SqlHolidaySource",
    "fetch_rate_to_sgd",
    "search_flights_raw",
]
