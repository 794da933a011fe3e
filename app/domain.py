"""Domain vocabulary and strict schemas for deals, searches and weekend suggestions.

These models are the contract between the pipeline and the HTTP layer: enums,
validated request parameters and the canonical deal shape. No fetching or
interpretation logic lives here.
"""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from app.errors import InvalidArgument

SGD = "SGD"


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


class LeaveHackReason(str, Enum):
    """Which holiday adjacency turned a weekend into a long weekend."""
    MON_PH = "MonPH"
    FRI_PH = "FriPH"
    THU_PH_PLUS_LEAVE = "ThuPHPlusLeave"
    TUE_PH_PLUS_LEAVE = "TuePHPlusLeave"


class CacheStatus(str, Enum):
    """Outcome of a conditional search cache lookup."""
    MISS = "miss"
    HIT = "hit"
    NOT_MODIFIED = "not_modified"


class NormalizedDeal(_StrictBaseModel):
    """One flight option in canonical form, priced in whole SGD."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    price: int
    currency: Literal["SGD"] = SGD
    airline: str = ""
    duration_minutes: int = Field(default=0, ge=0)
    depart_at: str = ""
    return_at: str = ""
    stops: int = Field(default=0, ge=0)
    booking_url: str = ""
    baggage_included: bool = False


class FlightSearchParams(_StrictBaseModel):
    """Validated parameters of a flight search request."""
    origin: str = Field(min_length=3, max_length=3)
    destination: Optional[str] = Field(default=None, min_length=3, max_length=3)
    date_from: dt.date
    date_to: dt.date
    pax: Optional[int] = Field(default=None, ge=1)
    cabin: Optional[Literal["M", "W", "C", "F"]] = None
    max_stops: Optional[int] = Field(default=None, ge=0)

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def upper_iata(cls, v):
        """IATA codes are compared upper-case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def check_date_order(self) -> "FlightSearchParams":
        if self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        return self

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "FlightSearchParams":
        """Build params from untrusted input, mapping validation failures to InvalidArgument."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidArgument(str(exc)) from exc

    def canonical(self) -> Dict[str, Any]:
        """JSON-safe dict of the parameters that were actually supplied."""
        return self.model_dump(mode="json", exclude_none=True)


class CachedSearchEntry(_StrictBaseModel):
    """Normalized deals stored under a request fingerprint."""
    fingerprint: str
    payload: List[NormalizedDeal]
    stored_at: dt.datetime
    ttl_seconds: int = Field(gt=0)

    def expires_at(self) -> dt.datetime:
        return self.stored_at + dt.timedelta(seconds=self.ttl_seconds)

    def is_expired(self, now: dt.datetime) -> bool:
        return now >= self.expires_at()


class WeekendSuggestion(_StrictBaseModel):
    """Outbound weekend window, possibly extended by a holiday."""
    start: dt.date
    end: dt.date
    is_leave_hack: bool
    reason: Optional[LeaveHackReason] = None
    leave_days_needed: int = Field(default=0, ge=0)


class Holiday(_StrictBaseModel):
    """A public holiday as stored by the holiday source."""
    date: dt.date
    name: str
