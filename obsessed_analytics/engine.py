"""
Obsessed Analytics — Engine

Stateful façade over the pure calculators. Holds the workout log, the
exercise catalog and the selected period; every derived view is computed on
first read and memoized for the current calendar day.

Each view declares which inputs it reads (log, catalog, period, tier size).
A mutator drops only the views that read the input it changed, and the whole
memo is dropped when the day rolls over.
"""
import logging
from datetime import date, datetime

from obsessed_analytics import insights as insight_rules
from obsessed_analytics import records, streaks, volume
from obsessed_analytics.config import BODYWEIGHT, DEFAULT_PERIOD, WEIGHT_TIER_SIZE_KG
from obsessed_analytics.dates import iso, local_tz
from obsessed_analytics.exercise_index import ExerciseIndex
from obsessed_analytics.periods import coerce_period, resolve_period
from obsessed_analytics.selector import first_workout_day, select_period, session_days
from obsessed_analytics.trends import compare_aggregates, period_aggregate

logger = logging.getLogger(__name__)

LOG, CATALOG, PERIOD, TIER = "log", "catalog", "period", "tier"

VIEW_INPUTS = {
    "period_range": {LOG, PERIOD},
    "selection": {LOG, PERIOD},
    "session_days": {LOG},
    "pr_events": {LOG, CATALOG, TIER},
    "total_workouts": {LOG, PERIOD},
    "volume_load": {LOG, PERIOD},
    "avg_volume_per_workout": {LOG, PERIOD},
    "total_sets": {LOG, PERIOD},
    "best_workout": {LOG, PERIOD},
    "volume_by_day": {LOG, PERIOD},
    "weekly_volume_progression": {LOG, PERIOD},
    "progressive_overload_stats": {LOG, PERIOD},
    "duration_stats": {LOG, PERIOD},
    "period_comparison": {LOG, PERIOD},
    "muscle_distribution": {LOG, CATALOG, PERIOD},
    "muscle_distribution_by_volume": {LOG, CATALOG, PERIOD},
    "muscle_volume_by_day": {LOG, CATALOG, PERIOD},
    "rest_days": {LOG},
    "current_streak": {LOG},
    "longest_streak": {LOG},
    "exercise_progress_table": {LOG, CATALOG},
    "all_prs": {LOG, CATALOG, TIER},
    "recent_prs": {LOG, CATALOG, TIER},
    "insights": {LOG, CATALOG, PERIOD, TIER},
    "frequency_heatmap": {LOG},
    "daily_workout_counts": {LOG},
    "contribution_grid": {LOG, PERIOD},
}


class AnalyticsEngine:
    def __init__(
        self,
        workouts=None,
        catalog=(),
        period: str = DEFAULT_PERIOD,
        today: date | None = None,
        tier_size: float = WEIGHT_TIER_SIZE_KG,
        body_weight: float | None = None,
    ):
        # None means "not loaded yet", which keeps allTime provisional
        self._log = list(workouts) if workouts is not None else None
        self._catalog = tuple(catalog)
        self._index = ExerciseIndex(self._catalog)
        self._period = coerce_period(period)
        self._fixed_today = today
        self._tier_size = tier_size
        self._body_weight = body_weight
        self._memo: dict[str, object] = {}
        self._memo_day: date | None = None

    # ── Inputs ───────────────────────────────────────────────────────

    @property
    def today(self) -> date:
        if self._fixed_today is not None:
            return self._fixed_today
        return datetime.now(local_tz()).date()

    @property
    def period(self) -> str:
        return self._period

    @property
    def log_loaded(self) -> bool:
        return self._log is not None

    @property
    def tier_size(self) -> float:
        return self._tier_size

    def set_period(self, period_id) -> str:
        """Select a period; unknown ids fall back to the default. Returns the id in effect."""
        resolved = coerce_period(period_id)
        if resolved != self._period:
            self._period = resolved
            self._invalidate(PERIOD)
        return resolved

    def set_workouts(self, workouts) -> None:
        self._log = list(workouts) if workouts is not None else None
        self._invalidate(LOG)

    def set_catalog(self, catalog) -> None:
        self._catalog = tuple(catalog)
        self._index = ExerciseIndex(self._catalog)
        self._invalidate(CATALOG)

    def set_tier_size(self, tier_size: float) -> None:
        if tier_size != self._tier_size:
            self._tier_size = tier_size
            self._invalidate(TIER)

    def set_body_weight(self, body_weight: float | None) -> None:
        self._body_weight = body_weight

    # ── Memo ─────────────────────────────────────────────────────────

    def _invalidate(self, changed: str) -> None:
        stale = [view for view in self._memo if changed in VIEW_INPUTS[view]]
        for view in stale:
            del self._memo[view]
        logger.debug("%s changed: dropped %d cached views", changed, len(stale))

    def _memoized(self, view: str, compute):
        today = self.today
        if self._memo_day != today:
            self._memo.clear()
            self._memo_day = today
        if view not in self._memo:
            self._memo[view] = compute()
        return self._memo[view]

    @property
    def _workouts(self) -> list:
        return self._log or []

    @property
    def _selection(self) -> tuple[list, list]:
        return self._memoized("selection", lambda: select_period(self._workouts, self.period_range))

    @property
    def _period_workouts(self) -> list:
        return self._selection[0]

    @property
    def _comparison_workouts(self) -> list:
        return self._selection[1]

    @property
    def _session_days(self) -> set:
        return self._memoized("session_days", lambda: session_days(self._workouts))

    @property
    def _pr_events(self) -> list:
        return self._memoized(
            "pr_events", lambda: records.detect_prs(self._workouts, self._tier_size, self._index)
        )

    # ── Period ───────────────────────────────────────────────────────

    @property
    def period_range(self):
        return self._memoized(
            "period_range",
            lambda: resolve_period(
                self._period,
                self.today,
                first_workout_day(self._workouts),
                log_available=self.log_loaded,
            ),
        )

    # ── Volume ───────────────────────────────────────────────────────

    @property
    def total_workouts(self) -> int:
        return self._memoized("total_workouts", lambda: len(self._period_workouts))

    @property
    def volume_load(self) -> float:
        return self._memoized("volume_load", lambda: volume.total_volume(self._period_workouts))

    @property
    def avg_volume_per_workout(self) -> int:
        return self._memoized(
            "avg_volume_per_workout", lambda: volume.avg_volume_per_workout(self._period_workouts)
        )

    @property
    def total_sets(self) -> int:
        return self._memoized("total_sets", lambda: volume.total_sets(self._period_workouts))

    @property
    def best_workout(self) -> dict | None:
        return self._memoized("best_workout", lambda: volume.best_workout(self._period_workouts))

    @property
    def volume_by_day(self) -> list[dict]:
        pr = self.period_range
        return self._memoized(
            "volume_by_day", lambda: volume.volume_by_day(self._period_workouts, pr.start, pr.end)
        )

    @property
    def muscle_distribution(self) -> list[dict]:
        return self._memoized(
            "muscle_distribution",
            lambda: volume.muscle_distribution(self._period_workouts, self._index),
        )

    @property
    def muscle_distribution_by_volume(self) -> list[dict]:
        return self._memoized(
            "muscle_distribution_by_volume",
            lambda: volume.muscle_distribution_by_volume(self._period_workouts, self._index),
        )

    @property
    def muscle_volume_by_day(self) -> list[dict]:
        pr = self.period_range
        return self._memoized(
            "muscle_volume_by_day",
            lambda: volume.muscle_volume_by_day(self._period_workouts, self._index, pr.start, pr.end),
        )

    @property
    def weekly_volume_progression(self) -> list[dict]:
        return self._memoized(
            "weekly_volume_progression",
            lambda: volume.weekly_volume_progression(self._period_workouts),
        )

    @property
    def progressive_overload_stats(self) -> dict | None:
        return self._memoized(
            "progressive_overload_stats",
            lambda: volume.progressive_overload_stats(self.weekly_volume_progression),
        )

    @property
    def duration_stats(self) -> dict | None:
        return self._memoized("duration_stats", lambda: volume.duration_stats(self._period_workouts))

    # ── Heatmaps ─────────────────────────────────────────────────────

    @property
    def frequency_heatmap(self) -> dict[str, list[int]]:
        return self._memoized("frequency_heatmap", lambda: volume.frequency_heatmap(self._workouts))

    @property
    def daily_workout_counts(self) -> dict[str, int]:
        return self._memoized(
            "daily_workout_counts", lambda: volume.daily_workout_counts(self._workouts)
        )

    @property
    def contribution_grid(self) -> list[list[dict]]:
        pr = self.period_range
        return self._memoized(
            "contribution_grid",
            lambda: volume.contribution_grid(self.daily_workout_counts, self.today, pr.start, pr.end),
        )

    # ── Streaks ──────────────────────────────────────────────────────

    @property
    def rest_days(self) -> int:
        return self._memoized("rest_days", lambda: streaks.rest_days(self._session_days, self.today))

    @property
    def current_streak(self) -> int:
        return self._memoized(
            "current_streak", lambda: streaks.current_streak(self._session_days, self.today)
        )

    @property
    def longest_streak(self) -> dict:
        return self._memoized("longest_streak", lambda: streaks.longest_streak(self._session_days))

    # ── Comparison ───────────────────────────────────────────────────

    def _compute_period_comparison(self) -> dict:
        current = period_aggregate(self._period_workouts)
        if self.period_range.comparison is None:
            return {"current": current, "previous": None, "changes": {}}
        previous = period_aggregate(self._comparison_workouts)
        return {
            "current": current,
            "previous": previous,
            "changes": compare_aggregates(current, previous),
        }

    @property
    def period_comparison(self) -> dict:
        return self._memoized("period_comparison", self._compute_period_comparison)

    # ── Records ──────────────────────────────────────────────────────

    @property
    def exercise_progress_table(self) -> list[dict]:
        return self._memoized(
            "exercise_progress_table",
            lambda: records.exercise_progress_table(self._workouts, self._index),
        )

    @property
    def all_prs(self) -> list[dict]:
        return self._memoized("all_prs", lambda: list(reversed(self._pr_events)))

    @property
    def recent_prs(self) -> list[dict]:
        return self._memoized("recent_prs", lambda: records.recent_prs(self.all_prs, self.today))

    # ── Insights ─────────────────────────────────────────────────────

    def _compute_insights(self) -> dict:
        pr = self.period_range
        changes = self.period_comparison["changes"]
        period_prs = [e for e in self.all_prs if iso(pr.start) <= e["date"] <= iso(pr.end)]
        return {
            "restDays": insight_rules.rest_days_insight(self.rest_days),
            "streak": insight_rules.streak_insight(self.current_streak),
            "workouts": insight_rules.workout_count_insight(
                self.total_workouts,
                insight_rules.workout_target(pr.days),
                changes.get("workouts", {}).get("changePercentage", 0),
            ),
            "volume": insight_rules.volume_insight(
                changes.get("volume", {}).get("changePercentage", 0)
            ),
            "prs": insight_rules.pr_insight(len(period_prs), len(self.all_prs)),
        }

    @property
    def insights(self) -> dict:
        return self._memoized("insights", self._compute_insights)

    @property
    def body_weight(self) -> float | None:
        return self._body_weight if self._body_weight is not None else BODYWEIGHT

    # ── Export ───────────────────────────────────────────────────────

    def summary(self) -> dict:
        """Every view in one JSON-friendly dict."""
        pr = self.period_range
        longest = self.longest_streak
        return {
            "period": {
                "id": pr.period,
                "start": iso(pr.start),
                "end": iso(pr.end),
                "comparison": (
                    {"start": iso(pr.comparison.start), "end": iso(pr.comparison.end)}
                    if pr.comparison is not None else None
                ),
                "provisional": pr.provisional,
            },
            "totalWorkouts": self.total_workouts,
            "volumeLoad": self.volume_load,
            "avgVolumePerWorkout": self.avg_volume_per_workout,
            "totalSets": self.total_sets,
            "restDays": self.rest_days,
            "currentStreak": self.current_streak,
            "longestStreak": {
                "length": longest["length"],
                "start": iso(longest["start"]),
                "end": iso(longest["end"]),
            },
            "bestWorkout": self.best_workout,
            "volumeByDay": self.volume_by_day,
            "muscleDistribution": self.muscle_distribution,
            "muscleDistributionByVolume": self.muscle_distribution_by_volume,
            "muscleVolumeByDay": self.muscle_volume_by_day,
            "weeklyVolumeProgression": self.weekly_volume_progression,
            "progressiveOverloadStats": self.progressive_overload_stats,
            "durationStats": self.duration_stats,
            "periodComparison": self.period_comparison,
            "exerciseProgressTable": self.exercise_progress_table,
            "allPRs": self.all_prs,
            "recentPRs": self.recent_prs,
            "insights": self.insights,
            "frequencyHeatmap": self.frequency_heatmap,
            "dailyWorkoutCounts": self.daily_workout_counts,
            "contributionGrid": self.contribution_grid,
            "bodyWeight": self.body_weight,
        }
