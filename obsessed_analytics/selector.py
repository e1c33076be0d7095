"""
Obsessed Analytics — Workout Selector

Only completed sessions with a usable completion timestamp ever reach the
calculators. Ranges are inclusive calendar days in local time.
"""
import logging
from datetime import date, datetime

from obsessed_analytics.dates import parse_timestamp

logger = logging.getLogger(__name__)


def completed_workouts(log) -> list:
    return [w for w in (log or []) if w.is_completed]


def dated_workouts(log) -> list[tuple[datetime, object]]:
    """
    Completed sessions paired with their local completion datetime, in log
    order. Sessions without a parsable completedAt are dropped.
    """
    out = []
    for w in completed_workouts(log):
        completed = parse_timestamp(w.completed_at)
        if completed is None:
            logger.debug("Skipping workout %s: missing or invalid completedAt", w.id)
            continue
        out.append((completed, w))
    return out


def chronological(log) -> list[tuple[datetime, object]]:
    """dated_workouts sorted ascending; ties keep log order."""
    return sorted(dated_workouts(log), key=lambda pair: pair[0])


def session_days(log) -> set[date]:
    return {completed.date() for completed, _ in dated_workouts(log)}


def first_workout_day(log) -> date | None:
    days = session_days(log)
    return min(days) if days else None


def workouts_in_range(log, start: date, end: date) -> list:
    return [w for completed, w in dated_workouts(log) if start <= completed.date() <= end]


def select_period(log, period_range) -> tuple[list, list]:
    """(period_workouts, comparison_workouts) for a resolved PeriodRange."""
    current = workouts_in_range(log, period_range.start, period_range.end)
    comp = period_range.comparison
    previous = workouts_in_range(log, comp.start, comp.end) if comp is not None else []
    return current, previous
