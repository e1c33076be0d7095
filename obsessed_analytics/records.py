"""
Obsessed Analytics — Personal Records

PR events come from a single ascending pass over the whole log. Two
categories are tracked per exercise:

- weight: best estimated 1RM for any rep count (heaviest effective load)
- reps:   most reps at a weight tier (weight rounded to the nearest tier)

The first set seen in a category only sets the baseline. An event is emitted
each time a later set strictly beats the running best, and a set emits at
most one event: a new e1RM best is reported as a weight PR even when it also
beats its tier's rep count. Weight events therefore have strictly increasing
estimated1RM per exercise. Rep events are ranked within their tier only, so
their reps strictly increase per (exercise, tier) while their estimated1RM
sits at or below the exercise's best.
"""
import math

import numpy as np
import pandas as pd

from obsessed_analytics.config import (
    EXERCISE_TREND_MIN_POINTS,
    EXERCISE_TREND_THRESHOLD_PERCENT,
    PROGRESS_STATUS,
    RECENT_PR_DAYS,
    WEIGHT_TIER_SIZE_KG,
)
from obsessed_analytics.dates import iso
from obsessed_analytics.exercise_index import ExerciseIndex
from obsessed_analytics.frames import sets_frame
from obsessed_analytics.selector import chronological, completed_workouts
from obsessed_analytics.trends import linear_trend


def _epley(weight: float, reps: int) -> float:
    return weight if reps == 1 else weight * (1 + reps / 30)


def estimate_1rm(weight, reps) -> float:
    """Epley estimate, rounded to 0.1. A single is its own 1RM."""
    if not weight or not reps or weight <= 0 or reps <= 0:
        return 0
    return round(_epley(weight, reps), 1)


def weight_tier(weight: float, tier_size: float = WEIGHT_TIER_SIZE_KG) -> float:
    """Nearest multiple of tier_size, halves up. Light loads never collapse to a 0 tier."""
    if tier_size <= 0:
        return weight
    tier = math.floor(weight / tier_size + 0.5) * tier_size
    return tier if tier > 0 else tier_size


# ═══════════════════════════════════════════════════════════════════════
# 1. PR EVENTS
# ═══════════════════════════════════════════════════════════════════════

def _event(kind, eid, name, s, day, workout_id, e1rm, improvement) -> dict:
    return {
        "exerciseId": eid,
        "exerciseName": name,
        "type": kind,
        "weight": s.weight,
        "reps": s.reps,
        "date": day,
        "workoutId": workout_id,
        "estimated1RM": e1rm,
        "improvement": round(improvement, 2),
    }


def detect_prs(log, tier_size: float = WEIGHT_TIER_SIZE_KG, index: ExerciseIndex | None = None) -> list[dict]:
    """PR events in emission (chronological) order."""
    index = index or ExerciseIndex()
    best_1rm: dict[str, float] = {}
    best_reps: dict[tuple[str, float], int] = {}
    events = []

    for completed, w in chronological(log):
        day = iso(completed.date())
        for ex in w.exercises:
            eid = ex.exercise_id
            if not eid:
                continue
            name = index.display_name(eid, ex.exercise_name)
            for s in ex.sets:
                if s.weight <= 0 or s.reps <= 0:
                    continue
                e1rm = estimate_1rm(s.weight, s.reps)

                prior = best_1rm.get(eid)
                weight_pr = prior is not None and e1rm > prior
                if prior is None or weight_pr:
                    best_1rm[eid] = e1rm
                if weight_pr:
                    events.append(_event("weight", eid, name, s, day, w.id, e1rm, e1rm - prior))

                tier = weight_tier(s.weight, tier_size)
                prior_reps = best_reps.get((eid, tier))
                if prior_reps is not None and s.reps > prior_reps and not weight_pr:
                    # Delta measured at the tier weight so it is always positive
                    events.append(_event(
                        "reps", eid, name, s, day, w.id, e1rm,
                        _epley(tier, s.reps) - _epley(tier, prior_reps),
                    ))
                if prior_reps is None or s.reps > prior_reps:
                    best_reps[(eid, tier)] = s.reps

    return events


def all_prs(log, tier_size: float = WEIGHT_TIER_SIZE_KG, index: ExerciseIndex | None = None) -> list[dict]:
    """Every PR event, newest first."""
    return list(reversed(detect_prs(log, tier_size, index)))


def recent_prs(events: list[dict], today, days: int = RECENT_PR_DAYS) -> list[dict]:
    cutoff = (pd.Timestamp(today) - pd.Timedelta(days=days - 1)).date().isoformat()
    today_iso = iso(today)
    return [e for e in events if cutoff <= e["date"] <= today_iso]


# ═══════════════════════════════════════════════════════════════════════
# 2. PER-EXERCISE PROGRESS
# ═══════════════════════════════════════════════════════════════════════

def classify_trend(history_1rm: list[float]) -> tuple[str, float]:
    """Least-squares slope of session-best 1RM, as % of the mean."""
    if len(history_1rm) < EXERCISE_TREND_MIN_POINTS:
        return "insufficient_data", 0
    mean = float(np.mean(history_1rm))
    if mean <= 0:
        return "flat", 0
    pct = round(linear_trend(history_1rm)["slope"] / mean * 100, 1)
    if pct > EXERCISE_TREND_THRESHOLD_PERCENT:
        return "up", pct
    if pct < -EXERCISE_TREND_THRESHOLD_PERCENT:
        return "down", pct
    return "flat", pct


def exercise_progress_table(log, index: ExerciseIndex | None = None) -> list[dict]:
    """
    One row per exercise with weighted sets anywhere in the log: latest
    session 1RM, best-ever set, session history and trend. Newest first.
    """
    index = index or ExerciseIndex()
    df = sets_frame(completed_workouts(log), index)
    if df.empty:
        return []
    df = df[(df["weight_kg"] > 0) & (df["reps"] > 0) & (df["exercise_id"] != "")].copy()
    if df.empty:
        return []
    df["e1rm"] = np.round(
        np.where(df["reps"] == 1, df["weight_kg"], df["weight_kg"] * (1 + df["reps"] / 30)), 1
    )

    rows = []
    for eid, ex_df in df.groupby("exercise_id", sort=False):
        per_session = (
            ex_df.groupby(["completed_at", "workout_id"], sort=True)
            .agg(e1rm=("e1rm", "max"), max_weight=("weight_kg", "max"), date=("date", "first"))
            .reset_index()
        )
        history = [
            {
                "date": r.date.date().isoformat(),
                "estimated1RM": float(r.e1rm),
                "maxWeight": float(r.max_weight),
            }
            for r in per_session.itertuples(index=False)
        ]
        best = ex_df.loc[ex_df["e1rm"].idxmax()]
        trend, trend_pct = classify_trend([h["estimated1RM"] for h in history])
        rpe = pd.to_numeric(ex_df["rpe"], errors="coerce").dropna()

        rows.append({
            "exerciseId": eid,
            "name": ex_df["exercise"].iloc[-1],
            "muscleGroup": index.muscle_for(eid),
            "estimated1RM": history[-1]["estimated1RM"],
            "bestPR": {
                "weight": float(best["weight_kg"]),
                "reps": int(best["reps"]),
                "estimated1RM": float(best["e1rm"]),
                "date": best["date"].date().isoformat(),
            },
            "lastPerformed": history[-1]["date"],
            "sessions": len(history),
            "history": history,
            "trend": trend,
            "trendPercentage": trend_pct,
            "status": PROGRESS_STATUS[trend],
            "avgRpe": round(float(rpe.mean()), 1) if not rpe.empty else None,
        })

    rows.sort(key=lambda r: r["name"])
    rows.sort(key=lambda r: r["lastPerformed"], reverse=True)
    return rows
