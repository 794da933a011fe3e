"""Leave-hack classifier: find weekends that public holidays turn into long weekends.

Each weekend window is checked against an ordered rule table. The first rule
whose holiday test matches claims the window; later rules are not consulted.
Zero-leave rules come first, and among those the trailing Monday holiday is
checked before the leading Friday one. Changing the order changes which
holiday claims an ambiguous weekend, so the table order is part of the
contract.

A window with holidays on both sides reports only the first matching rule,
not the larger combined span.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from app.app_types import LongWeekendCandidate
from app.dates import DateLike, DateRange, add_days, next_n_weekends, to_holiday_set
from app.domain import LeaveHackReason, WeekendSuggestion
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="leave_hacks")

DEFAULT_WINDOW_COUNT = 12


@dataclass(frozen=True)
class HolidayRule:
    """Holiday test plus the extended range it yields for a Fri-Sun window."""
    reason: LeaveHackReason
    holiday_day: Callable[[DateRange], dt.date]
    extend: Callable[[DateRange], DateRange]
    leave_days_needed: int


RULES: tuple[HolidayRule, ...] = (
    HolidayRule(
        reason=LeaveHackReason.MON_PH,
        holiday_day=lambda w: add_days(w.end, 1),
        extend=lambda w: DateRange(w.start, add_days(w.end, 1)),
        leave_days_needed=0,
    ),
    HolidayRule(
        reason=LeaveHackReason.FRI_PH,
        holiday_day=lambda w: w.start,
        extend=lambda w: w,
        leave_days_needed=0,
    ),
    # Friday taken as leave
    HolidayRule(
        reason=LeaveHackReason.THU_PH_PLUS_LEAVE,
        holiday_day=lambda w: add_days(w.start, -1),
        extend=lambda w: DateRange(add_days(w.start, -1), w.end),
        leave_days_needed=1,
    ),
    # Monday taken as leave
    HolidayRule(
        reason=LeaveHackReason.TUE_PH_PLUS_LEAVE,
        holiday_day=lambda w: add_days(w.end, 2),
        extend=lambda w: DateRange(w.start, add_days(w.end, 2)),
        leave_days_needed=1,
    ),
)


def classify_weekend(window: DateRange, holidays: Iterable[DateLike]) -> Optional[LongWeekendCandidate]:
    """Return the first rule match for ``window``, or None if no holiday is adjacent."""
    holiday_set = holidays if isinstance(holidays, frozenset) else to_holiday_set(holidays)
    for rule in RULES:
        if rule.holiday_day(window) in holiday_set:
            return LongWeekendCandidate(
                window=window,
                reason=rule.reason,
                leave_days_needed=rule.leave_days_needed,
                effective_range=rule.extend(window),
            )
    return None


def long_weekend_combos(
    reference_instant: DateLike,
    holidays: Iterable[DateLike],
    window_count: int = DEFAULT_WINDOW_COUNT,
) -> List[LongWeekendCandidate]:
    """Classify the next ``window_count`` weekends and keep the long ones, in date order."""
    holiday_set = to_holiday_set(holidays)
    combos = []
    for window in next_n_weekends(window_count, reference_instant):
        candidate = classify_weekend(window, holiday_set)
        if candidate is not None:
            combos.append(candidate)
    logger.debug(
        "Classified weekends",
        extra={"windows": window_count, "long_weekends": len(combos), "holidays": len(holiday_set)},
    )
    return combos


def is_leave_hack(date_range: DateRange, holidays: Iterable[DateLike]) -> bool:
    """True iff ``date_range`` is exactly the effective range of a classified long weekend."""
    return any(
        c.effective_range == date_range
        for c in long_weekend_combos(date_range.start, holidays)
    )


def weekend_suggestions(
    reference_instant: DateLike,
    holidays: Iterable[DateLike],
    window_count: int = DEFAULT_WINDOW_COUNT,
) -> List[WeekendSuggestion]:
    """One suggestion per upcoming weekend, extended where a holiday allows it."""
    holiday_set = to_holiday_set(holidays)
    suggestions = []
    for window in next_n_weekends(window_count, reference_instant):
        candidate = classify_weekend(window, holiday_set)
        if candidate is None:
            suggestions.append(WeekendSuggestion(start=window.start, end=window.end, is_leave_hack=False))
            continue
        effective = candidate.effective_range
        suggestions.append(
            WeekendSuggestion(
                start=effective.start,
                end=effective.end,
                is_leave_hack=is_leave_hack(effective, holiday_set),
                reason=candidate.reason,
                leave_days_needed=candidate.leave_days_needed,
            )
        )
    return suggestions
