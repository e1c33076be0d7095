"""
Obsessed Analytics — Insights

Metric value → {status, tag, value}. status is one of good / neutral /
warning; tag is a stable key a client can translate.
"""
from obsessed_analytics.config import INSIGHT_THRESHOLDS


def _insight(status: str, tag: str, value) -> dict:
    return {"status": status, "tag": tag, "value": value}


def rest_days_insight(rest_days: int, thresholds: dict = INSIGHT_THRESHOLDS["rest_days"]) -> dict:
    if rest_days == 0:
        return _insight("good", "strong_consistency", rest_days)
    if rest_days >= thresholds["warning"]:
        return _insight("warning", "overdue", rest_days)
    return _insight("good", "on_track", rest_days)


def streak_insight(streak: int, thresholds: dict = INSIGHT_THRESHOLDS["streak"]) -> dict:
    if streak == 0:
        return _insight("warning", "time_to_train", streak)
    if streak >= thresholds["excellent"]:
        return _insight("good", "keep_it_up", streak)
    if streak >= thresholds["good"]:
        return _insight("good", "streak_building", streak)
    return _insight("neutral", "on_track", streak)


def workout_target(period_days: int, weekly_target: int = INSIGHT_THRESHOLDS["workouts"]["weekly_target"]) -> int:
    """Weekly session target scaled to the length of the period (at least 1)."""
    return max(1, round(period_days / 7 * weekly_target))


def workout_count_insight(count: int, target: int, change_percent: float = 0) -> dict:
    if count >= target:
        return _insight("good", "strong_consistency", count)
    if change_percent > 0:
        return _insight("good", "great_progress", count)
    if count < target * 0.5:
        return _insight("warning", "needs_attention", count)
    return _insight("neutral", "on_track", count)


def volume_insight(change_percent: float, thresholds: dict = INSIGHT_THRESHOLDS["volume"]) -> dict:
    """Classify the period-over-period volume change (in %)."""
    if not change_percent:
        return _insight("neutral", "volume_stable", 0)
    if change_percent > 0:
        if change_percent >= thresholds["growth_target_percent"]:
            return _insight("good", "volume_growing", change_percent)
        return _insight("good", "great_progress", change_percent)
    if abs(change_percent) >= abs(thresholds["decline_warning_percent"]):
        return _insight("warning", "needs_attention", change_percent)
    return _insight("neutral", "maintaining_strength", change_percent)


def pr_insight(period_prs: int, total_prs: int) -> dict:
    if period_prs > 0:
        return _insight("good", "new_prs", period_prs)
    if total_prs > 0:
        return _insight("neutral", "maintaining_strength", period_prs)
    return _insight("neutral", "keep_it_up", period_prs)
