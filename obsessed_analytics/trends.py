"""
Obsessed Analytics — Trend Calculator

Period-over-period deltas and simple series classification. Every ratio is
guarded: a zero baseline yields 0, never inf/NaN.
"""
import numpy as np

from obsessed_analytics.config import TREND_THRESHOLD_PERCENT
from obsessed_analytics.frames import workout_volume


def calculate_change(current, previous) -> dict:
    current = current or 0
    previous = previous or 0
    change = current - previous
    if isinstance(change, float):
        change = round(change, 1)
    pct = round((current - previous) / previous * 100, 1) if previous else 0
    return {"change": change, "changePercentage": pct}


def compare_aggregates(current: dict, previous: dict | None) -> dict:
    """Per-metric change between two aggregates of identical shape."""
    if previous is None:
        return {}
    return {k: calculate_change(v, previous.get(k, 0)) for k, v in current.items()}


def period_aggregate(workouts) -> dict:
    volume = sum(workout_volume(w) for w in workouts)
    n = len(workouts)
    return {
        "workouts": n,
        "volume": round(volume, 1),
        "sets": sum(len(ex.sets) for w in workouts for ex in w.exercises),
        "avgVolume": round(volume / n) if n else 0,
        "duration": round(sum(float(w.duration or 0) for w in workouts), 1),
    }


def calculate_trend(series, threshold_percent: float = TREND_THRESHOLD_PERCENT) -> dict:
    """
    Compare mean(second half) against mean(first half).

    With an odd number of points the middle one belongs to the second half.
    Fewer than two points → insufficient_data.
    """
    values = [float(v) for v in series if v is not None and v == v]
    if len(values) < 2:
        return {"direction": "insufficient_data", "value": 0}

    mid = len(values) // 2
    first = float(np.mean(values[:mid]))
    second = float(np.mean(values[mid:]))
    pct = (second - first) / first * 100 if first else 0.0

    if abs(pct) < threshold_percent:
        direction = "stable"
    elif pct > 0:
        direction = "increasing"
    else:
        direction = "decreasing"
    return {"direction": direction, "value": round(pct, 1)}


def linear_trend(values) -> dict:
    """Least-squares fit of values against their position: slope, intercept, r²."""
    y = np.asarray(values, dtype=float)
    if len(y) < 2:
        return {"slope": 0.0, "intercept": 0.0, "r2": 0.0}
    x = np.arange(len(y), dtype=float)
    slope, intercept = np.polyfit(x, y, 1)
    predicted = slope * x + intercept
    ss_tot = float(((y - y.mean()) ** 2).sum())
    ss_res = float(((y - predicted) ** 2).sum())
    r2 = 1.0 if ss_tot == 0 else 1 - ss_res / ss_tot
    return {"slope": float(slope), "intercept": float(intercept), "r2": r2}
