"""Shared dataclasses and lightweight types used across modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

from app.dates import DateRange
from app.errors import InvalidArgument
from app.domain import SGD, CachedSearchEntry, CacheStatus, LeaveHackReason, NormalizedDeal


@dataclass(frozen=True)
class LongWeekendCandidate:
    """A weekend window annotated with the holiday rule that extended it."""
    window: DateRange
    reason: LeaveHackReason
    leave_days_needed: int
    effective_range: DateRange


@dataclass(frozen=True)
class FxRate:
    """SGD per one unit of ``from_currency``, with the time it was fetched."""
    from_currency: str
    rate: float
    fetched_at: datetime
    ttl_seconds: int
    to_currency: str = SGD

    def __post_init__(self) -> None:
        if not self.rate > 0:
            raise InvalidArgument(f"FX rate must be positive, got {self.rate}")

    def is_fresh(self, now: datetime) -> bool:
        return now < self.fetched_at + timedelta(seconds=self.ttl_seconds)

    def to_cache(self) -> dict:
        return {
            "from_currency": self.from_currency,
            "to_currency": self.to_currency,
            "rate": self.rate,
            "fetched_at": self.fetched_at.isoformat(),
            "ttl_seconds": self.ttl_seconds,
        }

    @classmethod
    def from_cache(cls, data: dict) -> "FxRate":
        return cls(
            from_currency=data["from_currency"],
            to_currency=data.get("to_currency", SGD),
            rate=float(data["rate"]),
            fetched_at=datetime.fromisoformat(data["fetched_at"]),
            ttl_seconds=int(data["ttl_seconds"]),
        )


@dataclass
class SearchOutcome:
    """Result of a flight search as handed to the HTTP layer."""
    etag: str
    max_age: int
    cache_hit: bool = False
    not_modified: bool = False
    deals: List[NormalizedDeal] = field(default_factory=list)


@dataclass
class CacheLookup:
    """Result of a conditional read against the search cache."""
    status: CacheStatus
    fingerprint: str
    entry: Optional[CachedSearchEntry] = None
