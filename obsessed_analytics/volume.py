"""
Obsessed Analytics — Volume Calculator

Volume = Σ weight × reps. Warm-up and drop sets count like any other set.
Sections 1 to 5 take the already-selected period workouts, the heatmaps in
section 6 take the whole log. Empty input gives 0 / [] / None / {}, never an
exception.
"""
from datetime import date, timedelta

import numpy as np
import pandas as pd

from obsessed_analytics.config import (
    GROWTH_TARGET_PERCENT,
    HEATMAP_LEVEL_THRESHOLDS,
    HEATMAP_WINDOW_DAYS,
    MUSCLE_GROUP_COLORS,
    OVERLOAD_STABLE_BAND_PERCENT,
    TREND_THRESHOLD_PERCENT,
    UNKNOWN_MUSCLE,
    WEEKDAYS,
)
from obsessed_analytics.dates import parse_timestamp
from obsessed_analytics.frames import sessions_frame, sets_frame, workout_volume
from obsessed_analytics.selector import completed_workouts
from obsessed_analytics.trends import calculate_change, calculate_trend


# ═══════════════════════════════════════════════════════════════════════
# 1. TOTALS
# ═══════════════════════════════════════════════════════════════════════

def total_volume(workouts) -> float:
    return float(sum(workout_volume(w) for w in workouts))


def total_sets(workouts) -> int:
    return sum(len(ex.sets) for w in workouts for ex in w.exercises)


def avg_volume_per_workout(workouts) -> int:
    n = len(workouts)
    return round(total_volume(workouts) / n) if n else 0


def best_workout(workouts) -> dict | None:
    """Highest-volume session; the earliest one wins a tie."""
    sessions = sessions_frame(workouts)
    if sessions.empty:
        return None
    best = sessions.loc[sessions["volume_kg"].idxmax()]
    return {
        "workoutId": best["workout_id"],
        "volume": float(best["volume_kg"]),
        "date": best["date"].date().isoformat(),
        "exercises": int(best["n_exercises"]),
        "sets": int(best["n_sets"]),
    }


# ═══════════════════════════════════════════════════════════════════════
# 2. DAILY BUCKETS
# ═══════════════════════════════════════════════════════════════════════

def volume_by_day(workouts, start, end) -> list[dict]:
    """
    One row per calendar day in [start, end], zero-filled.

    Sessions land on the local day of completedAt. Σ volume over the rows
    equals total_volume of the in-range workouts.
    """
    days = pd.date_range(start, end, freq="D")
    sessions = sessions_frame(workouts)
    if sessions.empty:
        daily = pd.DataFrame(0, index=days, columns=["volume_kg", "workouts", "n_exercises"])
    else:
        daily = (
            sessions.groupby("date")
            .agg(
                volume_kg=("volume_kg", "sum"),
                workouts=("workout_id", "count"),
                n_exercises=("n_exercises", "sum"),
            )
            .reindex(days, fill_value=0)
        )
    return [
        {
            "date": ts.date().isoformat(),
            "volume": float(row["volume_kg"]),
            "workouts": int(row["workouts"]),
            "exercises": int(row["n_exercises"]),
        }
        for ts, row in daily.iterrows()
    ]


def muscle_volume_by_day(workouts, index, start, end) -> list[dict]:
    """
    Same day bucketing as volume_by_day, one column per muscle group trained
    in the period. [] when the period has no sets at all.
    """
    df = sets_frame(workouts, index)
    if df.empty:
        return []
    days = pd.date_range(start, end, freq="D")
    pivot = (
        df.pivot_table(
            index="date", columns="muscle_group", values="volume_kg",
            aggfunc="sum", fill_value=0,
        )
        .reindex(days, fill_value=0)
    )
    muscles = sorted(pivot.columns)
    rows = []
    for ts, row in pivot.iterrows():
        rec = {"date": ts.date().isoformat()}
        rec.update({m: float(row[m]) for m in muscles})
        rows.append(rec)
    return rows


# ═══════════════════════════════════════════════════════════════════════
# 3. MUSCLE DISTRIBUTION
# ═══════════════════════════════════════════════════════════════════════

def _distribution(series: pd.Series) -> list[dict]:
    total = float(series.sum())
    out = series.rename("value").reset_index().rename(columns={"muscle_group": "muscle"})
    if total > 0:
        out["percentage"] = (out["value"] / total * 100).round(1)
    else:
        out["percentage"] = 0.0
    out = out.sort_values(["value", "muscle"], ascending=[False, True])
    return [
        {
            "muscle": r.muscle,
            "value": r.value.item() if hasattr(r.value, "item") else r.value,
            "percentage": float(r.percentage),
            "color": MUSCLE_GROUP_COLORS.get(r.muscle, MUSCLE_GROUP_COLORS[UNKNOWN_MUSCLE]),
        }
        for r in out.itertuples(index=False)
    ]


def muscle_distribution(workouts, index) -> list[dict]:
    """Set count per muscle group with share of all sets."""
    df = sets_frame(workouts, index)
    if df.empty:
        return []
    return _distribution(df.groupby("muscle_group").size())


def muscle_distribution_by_volume(workouts, index) -> list[dict]:
    df = sets_frame(workouts, index)
    if df.empty:
        return []
    return _distribution(df.groupby("muscle_group")["volume_kg"].sum())


# ═══════════════════════════════════════════════════════════════════════
# 4. PROGRESSIVE OVERLOAD (week over week)
# ═══════════════════════════════════════════════════════════════════════

def _overload_status(change_pct: float) -> str:
    if change_pct > OVERLOAD_STABLE_BAND_PERCENT:
        return "progressing"
    if change_pct < -OVERLOAD_STABLE_BAND_PERCENT:
        return "regressing"
    return "maintaining"


def weekly_volume_progression(workouts) -> list[dict]:
    """Monday-start weeks that contain sessions, with % change vs the previous one."""
    sessions = sessions_frame(workouts)
    if sessions.empty:
        return []
    sessions["week_start"] = sessions["date"] - pd.to_timedelta(
        sessions["date"].dt.weekday, unit="D"
    )
    weekly = (
        sessions.groupby("week_start")
        .agg(volume=("volume_kg", "sum"), workouts=("workout_id", "count"))
        .reset_index()
    )

    rows = []
    prev_volume = None
    for r in weekly.itertuples(index=False):
        volume = float(r.volume)
        if prev_volume is None:
            change, status = 0, "maintaining"
        else:
            change = calculate_change(volume, prev_volume)["changePercentage"]
            status = _overload_status(change)
        rows.append({
            "weekStart": r.week_start.date().isoformat(),
            "volume": volume,
            "workouts": int(r.workouts),
            "change": change,
            "status": status,
        })
        prev_volume = volume
    return rows


def progressive_overload_stats(progression: list[dict]) -> dict | None:
    """Summary of weekly_volume_progression. None with fewer than two weeks."""
    if len(progression) < 2:
        return None
    compared = progression[1:]
    changes = [w["change"] for w in compared]
    progressing = sum(1 for w in compared if w["status"] == "progressing")
    progress_rate = round(progressing / len(compared) * 100)
    avg_increase = round(float(np.mean(changes)), 1)

    if progress_rate >= 50:
        overall = "on_track"
    elif avg_increase < -OVERLOAD_STABLE_BAND_PERCENT:
        overall = "regressing"
    else:
        overall = "maintaining"

    return {
        "weeksProgressing": progressing,
        "totalWeeks": len(progression),
        "progressRate": progress_rate,
        "avgIncrease": avg_increase,
        "overallStatus": overall,
        "nextWeekTarget": round(progression[-1]["volume"] * (1 + GROWTH_TARGET_PERCENT / 100)),
    }


# ═══════════════════════════════════════════════════════════════════════
# 5. SESSION DURATION
# ═══════════════════════════════════════════════════════════════════════

def duration_stats(workouts) -> dict | None:
    """Average / shortest / longest duration (seconds) and its trend."""
    sessions = sessions_frame(workouts)
    timed = sessions[sessions["duration"] > 0]
    if timed.empty:
        return None
    shortest = timed.loc[timed["duration"].idxmin()]
    longest = timed.loc[timed["duration"].idxmax()]
    return {
        "count": len(timed),
        "average": round(float(timed["duration"].mean()), 1),
        "shortest": {"value": float(shortest["duration"]), "date": shortest["date"].date().isoformat()},
        "longest": {"value": float(longest["duration"]), "date": longest["date"].date().isoformat()},
        "trend": calculate_trend(timed["duration"].tolist(), TREND_THRESHOLD_PERCENT),
    }


# ═══════════════════════════════════════════════════════════════════════
# 6. HEATMAPS (full log, not period-scoped)
# ═══════════════════════════════════════════════════════════════════════

def frequency_heatmap(workouts) -> dict[str, list[int]]:
    """
    Completed sessions by local weekday × start hour, Monday first.

    Hours come from startedAt, falling back to completedAt when the start
    is missing. Every weekday always carries 24 hourly counts.
    """
    starts = []
    for w in completed_workouts(workouts):
        started = parse_timestamp(w.started_at) or parse_timestamp(w.completed_at)
        if started is not None:
            starts.append(started)

    grid = pd.DataFrame(0, index=range(7), columns=range(24))
    if starts:
        ts = pd.DatetimeIndex(starts)
        grid = (
            pd.DataFrame({"weekday": ts.weekday, "hour": ts.hour})
            .groupby(["weekday", "hour"])
            .size()
            .unstack(fill_value=0)
            .reindex(index=range(7), columns=range(24), fill_value=0)
        )
    return {day: [int(n) for n in grid.loc[i]] for i, day in enumerate(WEEKDAYS)}


def daily_workout_counts(workouts) -> dict[str, int]:
    """Completed sessions per local calendar day; days without one are absent."""
    sessions = sessions_frame(completed_workouts(workouts))
    if sessions.empty:
        return {}
    counts = sessions.groupby("date").size()
    return {ts.date().isoformat(): int(n) for ts, n in counts.items()}


def intensity_level(count: int) -> int:
    """0 for a rest day, then one level per threshold reached (3+ sessions is the top)."""
    return sum(1 for threshold in HEATMAP_LEVEL_THRESHOLDS if count >= threshold)


def contribution_grid(counts: dict[str, int], today: date, period_start: date, period_end: date) -> list[list[dict]]:
    """
    Monday-to-Sunday weeks covering the last HEATMAP_WINDOW_DAYS up to today.

    The window is fixed regardless of the selected period; cells inside the
    period are flagged with inPeriod.
    """
    start = today - timedelta(days=HEATMAP_WINDOW_DAYS)
    start -= timedelta(days=start.weekday())
    end = today + timedelta(days=6 - today.weekday())

    cells = []
    for ts in pd.date_range(start, end, freq="D"):
        day = ts.date()
        count = counts.get(day.isoformat(), 0)
        cells.append({
            "date": day.isoformat(),
            "count": count,
            "level": intensity_level(count),
            "inPeriod": period_start <= day <= period_end,
            "isToday": day == today,
        })
    return [cells[i:i + 7] for i in range(0, len(cells), 7)]
