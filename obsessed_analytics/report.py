"""
Obsessed Analytics — Report CLI
Run manually: python -m obsessed_analytics.report --user <uid> [--period last7Days]
Offline:      python -m obsessed_analytics.report --file export.json --json
"""
import argparse
import json
import logging
import sys
from datetime import date

import requests

from obsessed_analytics.config import DEFAULT_PERIOD, LOG_LEVEL, PERIOD_OPTIONS, RECENT_PR_DAYS
from obsessed_analytics.engine import AnalyticsEngine
from obsessed_analytics.models import ExerciseCatalogEntry, WorkoutRecord
from obsessed_analytics.store_client import fetch_body_weight, fetch_completed_workouts, list_exercises

logger = logging.getLogger(__name__)


def load_export(path: str) -> tuple[list, list]:
    """{"workouts": [...], "exercises": [...]} as written by the app's backup export."""
    with open(path, "r") as f:
        data = json.load(f)
    workouts = [WorkoutRecord.from_dict(w) for w in data.get("workouts", [])]
    exercises = [ExerciseCatalogEntry.from_dict(e) for e in data.get("exercises", [])]
    return workouts, exercises


def print_report(engine: AnalyticsEngine) -> None:
    pr = engine.period_range
    print(f"📊 Obsessed Analytics — {pr.period} ({pr.start} → {pr.end})")
    if pr.provisional:
        print("   ⚠️  No dated sessions yet, showing a provisional one-year window")

    print("\n🏋️ Volume")
    print(f"   Workouts: {engine.total_workouts}   Sets: {engine.total_sets}")
    print(f"   Volume load: {engine.volume_load:,.0f} kg   Avg/workout: {engine.avg_volume_per_workout:,} kg")
    best = engine.best_workout
    if best:
        print(f"   Best session: {best['volume']:,.0f} kg on {best['date']}")

    changes = engine.period_comparison["changes"]
    if changes:
        vol = changes["volume"]
        print(f"   vs previous period: {vol['change']:+,} kg ({vol['changePercentage']:+}%)")

    overload = engine.progressive_overload_stats
    if overload:
        print(f"   Overload: {overload['overallStatus']} "
              f"({overload['weeksProgressing']}/{overload['totalWeeks'] - 1} weeks up), "
              f"next week target {overload['nextWeekTarget']:,} kg")

    print("\n🔥 Consistency")
    longest = engine.longest_streak
    print(f"   Current streak: {engine.current_streak} days   Longest: {longest['length']} days")
    print(f"   Rest days: {engine.rest_days}")

    muscles = engine.muscle_distribution
    if muscles:
        print("\n💪 Sets per muscle group")
        for m in muscles:
            print(f"   {m['muscle']:<12} {m['value']:>4}  ({m['percentage']}%)")

    prs = engine.recent_prs
    print(f"\n🏆 PRs in the last {RECENT_PR_DAYS} days: {len(prs)}")
    for e in prs[:10]:
        print(f"   {e['date']}  {e['exerciseName']}: {e['weight']} kg × {e['reps']} "
              f"({e['type']}, e1RM {e['estimated1RM']})")

    print("\n💡 Insights")
    for name, insight in engine.insights.items():
        icon = {"good": "✅", "neutral": "➖", "warning": "⚠️"}[insight["status"]]
        print(f"   {icon} {name}: {insight['tag']} ({insight['value']})")

    if engine.body_weight is not None:
        print(f"\n⚖️  Body weight: {engine.body_weight} kg")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print training analytics for one user")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--user", help="User id in the document store")
    source.add_argument("--file", help="JSON export with 'workouts' and 'exercises'")
    parser.add_argument("--period", default=DEFAULT_PERIOD, choices=sorted(PERIOD_OPTIONS))
    parser.add_argument("--today", type=date.fromisoformat, help="Evaluate as of this day (YYYY-MM-DD)")
    parser.add_argument("--json", action="store_true", help="Dump every view as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    body_weight = None
    try:
        if args.file:
            workouts, exercises = load_export(args.file)
        else:
            workouts = fetch_completed_workouts(args.user)
            exercises = list_exercises()
            body_weight = fetch_body_weight(args.user)
    except FileNotFoundError:
        print(f"❌ File not found: {args.file}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"❌ Invalid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        print(f"❌ Store request failed: {e}", file=sys.stderr)
        sys.exit(1)
    logger.info("Loaded %d workouts and %d catalog exercises", len(workouts), len(exercises))

    engine = AnalyticsEngine(
        workouts, exercises, period=args.period, today=args.today, body_weight=body_weight,
    )
    if args.json:
        print(json.dumps(engine.summary(), indent=2, default=str))
    else:
        print_report(engine)


if __name__ == "__main__":
    main()
