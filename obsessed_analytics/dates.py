"""
Obsessed Analytics — Date helpers

Workout timestamps arrive in whatever shape the document store produced:
datetime objects, ISO strings, epoch numbers or {"seconds", "nanoseconds"}
maps. Everything is normalized to a naive *local* datetime before the
calendar day is taken, so bucketing never shifts a late-evening session into
the next UTC day.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pandas as pd

from obsessed_analytics.config import ANALYTICS_TZ

logger = logging.getLogger(__name__)

# Epoch values above this are milliseconds (year ~5138 in seconds).
_EPOCH_MS_CUTOFF = 1e11


def local_tz():
    return ZoneInfo(ANALYTICS_TZ) if ANALYTICS_TZ else None


def parse_timestamp(value) -> datetime | None:
    """
    Normalize a raw timestamp to a naive local datetime.

    Returns None for missing or unparsable values; callers drop such records
    from anything date-bucketed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        if not isinstance(seconds, (int, float)) or isinstance(seconds, bool):
            return None
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        if not isinstance(nanos, (int, float)) or isinstance(nanos, bool):
            return None
        try:
            dt = datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, (int, float)):
        secs = value / 1000 if abs(value) > _EPOCH_MS_CUTOFF else value
        try:
            dt = datetime.fromtimestamp(secs, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        if not value.strip():
            return None
        ts = pd.to_datetime(value, errors="coerce")
        if pd.isna(ts):
            logger.debug("Unparsable timestamp %r", value)
            return None
        dt = ts.to_pydatetime()
    else:
        return None

    if dt.tzinfo is not None:
        dt = dt.astimezone(local_tz()).replace(tzinfo=None)
    return dt


def month_start(day: date) -> date:
    return day.replace(day=1)


def previous_month(day: date) -> tuple[date, date]:
    """First and last day of the calendar month before `day`'s month."""
    last = month_start(day) - timedelta(days=1)
    return month_start(last), last


def year_bounds(year: int) -> tuple[date, date]:
    return date(year, 1, 1), date(year, 12, 31)


def iso(day: date | None) -> str | None:
    return day.isoformat() if day is not None else None
