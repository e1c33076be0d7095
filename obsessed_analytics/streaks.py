"""
Obsessed Analytics — Streak Tracker

Operates on the set of local calendar days with at least one completed
session (selector.session_days). Several sessions on one day count once.
"""
from datetime import date, timedelta


def current_streak(days, today: date) -> int:
    """
    Consecutive training days ending today, or ending yesterday when today
    has no session yet. Days after `today` are ignored.
    """
    days = {d for d in days if d <= today}
    if today in days:
        cursor = today
    elif today - timedelta(days=1) in days:
        cursor = today - timedelta(days=1)
    else:
        return 0

    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def has_active_streak(days, today: date) -> bool:
    return current_streak(days, today) > 0


def longest_streak(days) -> dict:
    """Longest run of consecutive days as {length, start, end}; first run wins ties."""
    ordered = sorted(set(days))
    if not ordered:
        return {"length": 0, "start": None, "end": None}

    best_len, best_start, best_end = 1, ordered[0], ordered[0]
    run_len, run_start = 1, ordered[0]
    for prev, cur in zip(ordered, ordered[1:]):
        if (cur - prev).days == 1:
            run_len += 1
        else:
            run_len, run_start = 1, cur
        if run_len > best_len:
            best_len, best_start, best_end = run_len, run_start, cur

    return {"length": best_len, "start": best_start, "end": best_end}


def rest_days(days, today: date) -> int:
    """Days since the most recent session; 0 if trained today or never."""
    past = [d for d in days if d <= today]
    if not past:
        return 0
    return max(0, (today - max(past)).days)
