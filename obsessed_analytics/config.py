"""
Obsessed Analytics — Configuration

Every tunable lives here. Values that differ between deployments are read
from the environment once, at import time; the tables below are static.
"""
import os

# ── Document store (read-only adapter) ───────────────────────────────
FIREBASE_PROJECT_ID = os.environ.get("FIREBASE_PROJECT_ID", "")
FIREBASE_ID_TOKEN = os.environ.get("FIREBASE_ID_TOKEN", "")

# ── Runtime ──────────────────────────────────────────────────────────
LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")

# IANA zone used to turn timestamps into calendar days. Empty = system local.
ANALYTICS_TZ = os.environ.get("ANALYTICS_TZ", "")

# Fallback body weight when the profile has none. Only surfaced, never used in math.
_bw = os.environ.get("BODYWEIGHT", "")
BODYWEIGHT: float | None = float(_bw) if _bw else None

# Profile lookups kept in memory by the store adapter (evict-oldest).
PROFILE_CACHE_SIZE = int(os.environ.get("PROFILE_CACHE_SIZE", "100"))

# ═════════════════════════════════════════════════════════════════════
# PERIODS
#
# Ids are persisted by clients (URL query, saved preferences), so they are
# matched bit-exact. Anything not listed here is rejected.
# ═════════════════════════════════════════════════════════════════════

PERIOD_OPTIONS = {
    "last7Days": {"type": "rolling", "days": 7, "comparison": "rolling"},
    "last14Days": {"type": "rolling", "days": 14, "comparison": "rolling"},
    "last30Days": {"type": "rolling", "days": 30, "comparison": "rolling"},
    "last90Days": {"type": "rolling", "days": 90, "comparison": "rolling"},
    "thisMonth": {"type": "calendarMonth", "comparison": "previousMonth"},
    "lastMonth": {"type": "previousCalendarMonth", "comparison": "monthBeforeLast"},
    "thisYear": {"type": "calendarYear", "comparison": "previousYear"},
    "lastYear": {"type": "previousCalendarYear", "comparison": "yearBeforeLast"},
    "allTime": {"type": "allTime", "comparison": None},
}

DEFAULT_PERIOD = os.environ.get("ANALYTICS_DEFAULT_PERIOD", "last30Days")
if DEFAULT_PERIOD not in PERIOD_OPTIONS:
    DEFAULT_PERIOD = "last30Days"

# All-time window used until the log has been loaded.
PROVISIONAL_WINDOW_DAYS = 365

# ═════════════════════════════════════════════════════════════════════
# PR DETECTION & PROGRESSION
# ═════════════════════════════════════════════════════════════════════

# Rep PRs are tracked per weight tier (weight rounded to the nearest tier).
WEIGHT_TIER_SIZE_KG = float(os.environ.get("WEIGHT_TIER_SIZE_KG", "2.5"))
RECENT_PR_DAYS = 30

# Exercise trend: least-squares slope relative to mean e1RM, in percent.
EXERCISE_TREND_THRESHOLD_PERCENT = 2.5
EXERCISE_TREND_MIN_POINTS = 4

# Week-over-week volume change inside this band counts as "maintaining".
OVERLOAD_STABLE_BAND_PERCENT = 2.5

# Generic half-vs-half trend (durations, etc.).
TREND_THRESHOLD_PERCENT = 5.0

PROGRESS_STATUS = {
    "up": {"label": "Progressing", "color": "green", "icon": "trending-up"},
    "down": {"label": "Regressing", "color": "red", "icon": "trending-down"},
    "flat": {"label": "Stalled", "color": "yellow", "icon": "minus"},
    "insufficient_data": {"label": "New", "color": "gray", "icon": "help-circle"},
}

# ═════════════════════════════════════════════════════════════════════
# INSIGHTS
# ═════════════════════════════════════════════════════════════════════

INSIGHT_THRESHOLDS = {
    "rest_days": {"warning": 3, "optimal_min": 1, "optimal_max": 2},
    "streak": {"excellent": 7, "good": 3},
    "workouts": {"monthly_target": 12, "weekly_target": 3},
    "volume": {"growth_target_percent": 5, "decline_warning_percent": -10},
}

GROWTH_TARGET_PERCENT = INSIGHT_THRESHOLDS["volume"]["growth_target_percent"]

UNKNOWN_MUSCLE = "unknown"

MUSCLE_GROUP_COLORS = {
    "chest": "#ef4444",
    "back": "#f97316",
    "legs": "#eab308",
    "shoulders": "#22c55e",
    "biceps": "#3b82f6",
    "triceps": "#06b6d4",
    "core": "#a855f7",
    "calves": "#ec4899",
    UNKNOWN_MUSCLE: "#6b7280",
}

# ═════════════════════════════════════════════════════════════════════
# HEATMAPS
# ═════════════════════════════════════════════════════════════════════

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# Contribution grid always spans this many days back from today.
HEATMAP_WINDOW_DAYS = 365
# Sessions per day at which each intensity level starts (level 0 = none).
HEATMAP_LEVEL_THRESHOLDS = (1, 2, 3)
