"""Interfaces and helpers for the external collaborators of the deal pipeline."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol

from app.domain import FlightSearchParams


class RateFetcher(Protocol):
    """Anything that can quote the current SGD rate for a currency."""

    def fetch_rate_to_sgd(self, currency: str) -> float:
        """Return SGD per one unit of ``currency``."""
        ...


class FlightSearchFetcher(Protocol):
    """Anything that can run a raw provider flight search."""

    def search(self, params: FlightSearchParams) -> Dict[str, Any]:
        """Return the provider's search document."""
        ...


class HolidaySource(Protocol):
    """Anything that can list upcoming public holiday dates."""

    def holiday_dates(self, today: dt.date) -> frozenset[dt.date]:
        """Return holiday dates on or after ``today``."""
        ...


@dataclass
class CallableRateFetcher(RateFetcher):
    """Wrap a rate callable so backends can be swapped."""

    rate_to_sgd: Callable[[str], float]

    def fetch_rate_to_sgd(self, currency: str) -> float:
        """Delegate to the configured rate callable."""
        return self.rate_to_sgd(currency)


@dataclass
class CallableFlightSearchFetcher(FlightSearchFetcher):
    """Wrap a search callable so backends can be swapped."""

    search_raw: Callable[[FlightSearchParams], Dict[str, Any]]

    def search(self, params: FlightSearchParams) -> Dict[str, Any]:
        """Delegate to the configured search callable."""
        return self.search_raw(params)
