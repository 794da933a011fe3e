"""Map raw Kiwi search results onto the canonical NormalizedDeal shape.

Providers fill fields inconsistently, so every field is read through an
ordered list of candidates and the first present value wins. Everything here
is pure: the FX rate must already be fetched before normalization runs.
"""
from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from app.app_types import FxRate
from app.domain import SGD, NormalizedDeal

MAX_RESULTS = 20


def first_present(*candidates: Any, default: Any = None) -> Any:
    """Return the first candidate that is not None."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return default


def is_number(value: Any) -> bool:
    """Finite int or float; bools, NaN and infinities do not count."""
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(Decimal(str(value)).to_integral_value(rounding=ROUND_HALF_UP))


def _segments(raw: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
    route = raw.get("route")
    if not isinstance(route, list):
        return []
    return [seg if isinstance(seg, Mapping) else {} for seg in route]


def _get(mapping: Any, key: str) -> Any:
    return mapping.get(key) if isinstance(mapping, Mapping) else None


def stop_count(raw: Mapping[str, Any]) -> int:
    return max(0, len(_segments(raw)) - 1)


def departure_time(raw: Mapping[str, Any]) -> str:
    segments = _segments(raw)
    first = segments[0] if segments else {}
    return first_present(
        first.get("local_departure"),
        raw.get("local_departure"),
        raw.get("utc_departure"),
        default="",
    )


def return_time(raw: Mapping[str, Any]) -> str:
    segments = _segments(raw)
    last = segments[-1] if segments else {}
    return first_present(
        last.get("local_arrival"),
        raw.get("local_arrival"),
        raw.get("utc_arrival"),
        default="",
    )


def airline_code(raw: Mapping[str, Any]) -> str:
    airlines = raw.get("airlines")
    segments = _segments(raw)
    return first_present(
        airlines[0] if isinstance(airlines, list) and airlines else None,
        segments[0].get("airline") if segments else None,
        default="",
    )


def raw_price(raw: Mapping[str, Any], currency: Optional[str]) -> float:
    """Provider price in the source currency: numeric ``price``, then ``conversion[currency]``, then 0."""
    price = raw.get("price")
    converted = _get(raw.get("conversion"), currency) if currency else None
    return first_present(
        price if is_number(price) else None,
        converted if is_number(converted) else None,
        default=0,
    )


def duration_minutes(raw: Mapping[str, Any]) -> int:
    total = _get(raw.get("duration"), "total")
    if not is_number(total) or total <= 0:
        return 0
    return round_half_up(total / 60)


def baggage_included(raw: Mapping[str, Any]) -> bool:
    """True only when the one-bag price is present and exactly zero."""
    one_bag = _get(raw.get("bags_price"), "1")
    return is_number(one_bag) and one_bag == 0


def normalize_result(raw: Mapping[str, Any], fx_rate: FxRate, source_currency: Optional[str] = None) -> NormalizedDeal:
    """Normalize a single raw result with an already-fetched rate."""
    currency = source_currency or fx_rate.from_currency
    sgd_price = raw_price(raw, currency) * fx_rate.rate
    return NormalizedDeal(
        # an overflowing conversion counts as no usable price
        price=round_half_up(sgd_price) if math.isfinite(sgd_price) else 0,
        currency=SGD,
        airline=str(airline_code(raw)),
        duration_minutes=duration_minutes(raw),
        depart_at=str(departure_time(raw)),
        return_at=str(return_time(raw)),
        stops=stop_count(raw),
        booking_url=str(raw.get("deep_link") or ""),
        baggage_included=baggage_included(raw),
    )


def normalize(
    raw_results: Iterable[Mapping[str, Any]],
    fx_rate: FxRate,
    *,
    source_currency: Optional[str] = None,
    limit: int = MAX_RESULTS,
) -> List[NormalizedDeal]:
    """Normalize the first ``limit`` results in provider order."""
    deals = []
    for i, raw in enumerate(raw_results):
        if i >= limit:
            break
        deals.append(normalize_result(raw if isinstance(raw, Mapping) else {}, fx_rate, source_currency))
    return deals
