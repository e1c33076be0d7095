"""
Obsessed Analytics — Period Resolver

Maps a period id (see config.PERIOD_OPTIONS) to a concrete inclusive
[start, end] calendar-day range plus the range it is compared against.
"""
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from obsessed_analytics.config import (
    DEFAULT_PERIOD,
    PERIOD_OPTIONS,
    PROVISIONAL_WINDOW_DAYS,
)
from obsessed_analytics.dates import month_start, previous_month, year_bounds

logger = logging.getLogger(__name__)


class InvalidPeriod(ValueError):
    """Unknown period id."""


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        return max(0, (self.end - self.start).days + 1)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class PeriodRange:
    period: str
    start: date
    end: date
    comparison: Optional[DateRange] = None
    provisional: bool = False

    @property
    def current(self) -> DateRange:
        return DateRange(self.start, self.end)

    @property
    def days(self) -> int:
        return self.current.days


def validate_period(period_id) -> str:
    if not isinstance(period_id, str) or period_id not in PERIOD_OPTIONS:
        raise InvalidPeriod(f"Unknown period {period_id!r}")
    return period_id


def coerce_period(period_id) -> str:
    """Validated id, or DEFAULT_PERIOD when the id is unknown."""
    try:
        return validate_period(period_id)
    except InvalidPeriod as e:
        logger.warning("%s, falling back to %s", e, DEFAULT_PERIOD)
        return DEFAULT_PERIOD


def _rolling(days: int, today: date) -> tuple[DateRange, DateRange]:
    current = DateRange(today - timedelta(days=days - 1), today)
    comp_end = current.start - timedelta(days=1)
    return current, DateRange(comp_end - timedelta(days=days - 1), comp_end)


def resolve_period(
    period_id,
    today: date,
    first_workout_day: date | None = None,
    log_available: bool = True,
) -> PeriodRange:
    """
    Resolve a period id against `today`.

    allTime anchors at the first completed session. Until the log is loaded
    (or while it holds no dated session) a one-year window stands in and the
    result is flagged `provisional`; recompute once data arrives.
    """
    period_id = coerce_period(period_id)
    opt = PERIOD_OPTIONS[period_id]
    kind = opt["type"]

    if kind == "rolling":
        current, comparison = _rolling(opt["days"], today)
        return PeriodRange(period_id, current.start, current.end, comparison)

    if kind == "calendarMonth":
        prev_start, prev_end = previous_month(today)
        return PeriodRange(
            period_id, month_start(today), today, DateRange(prev_start, prev_end)
        )

    if kind == "previousCalendarMonth":
        start, end = previous_month(today)
        comp_start, comp_end = previous_month(start)
        return PeriodRange(period_id, start, end, DateRange(comp_start, comp_end))

    if kind == "calendarYear":
        comp_start, comp_end = year_bounds(today.year - 1)
        return PeriodRange(
            period_id, date(today.year, 1, 1), today, DateRange(comp_start, comp_end)
        )

    if kind == "previousCalendarYear":
        start, end = year_bounds(today.year - 1)
        comp_start, comp_end = year_bounds(today.year - 2)
        return PeriodRange(period_id, start, end, DateRange(comp_start, comp_end))

    # allTime
    if log_available and first_workout_day is not None:
        return PeriodRange(period_id, min(first_workout_day, today), today)
    return PeriodRange(
        period_id,
        today - timedelta(days=PROVISIONAL_WINDOW_DAYS),
        today,
        provisional=True,
    )
