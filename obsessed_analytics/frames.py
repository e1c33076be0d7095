"""
Obsessed Analytics — Workout records → pandas DataFrames

Two flat views of a list of WorkoutRecords:
- sessions_frame: one row per session (volume uses the denormalized total
  when present)
- sets_frame: one row per set, tagged with the exercise's muscle group

Undated sessions are dropped here, so nothing downstream can bucket them.
"""
import pandas as pd

from obsessed_analytics.dates import parse_timestamp

SESSION_COLUMNS = [
    "workout_id", "completed_at", "date", "volume_kg",
    "n_exercises", "n_sets", "duration",
]
SET_COLUMNS = [
    "workout_id", "completed_at", "date", "exercise_id", "exercise",
    "muscle_group", "set_num", "set_type", "weight_kg", "reps", "rpe", "volume_kg",
]


def workout_volume(workout) -> float:
    """Denormalized totalVolume when present and > 0, else Σ weight × reps."""
    if workout.total_volume is not None and workout.total_volume > 0:
        return float(workout.total_volume)
    return float(sum(s.weight * s.reps for ex in workout.exercises for s in ex.sets))


def sessions_frame(workouts) -> pd.DataFrame:
    rows = []
    for w in workouts:
        completed = parse_timestamp(w.completed_at)
        if completed is None:
            continue
        rows.append({
            "workout_id": w.id,
            "completed_at": pd.Timestamp(completed),
            "date": pd.Timestamp(completed.date()),
            "volume_kg": workout_volume(w),
            "n_exercises": len(w.exercises),
            "n_sets": sum(len(ex.sets) for ex in w.exercises),
            "duration": float(w.duration or 0),
        })
    df = pd.DataFrame(rows, columns=SESSION_COLUMNS)
    if not df.empty:
        df = df.sort_values("completed_at", kind="stable").reset_index(drop=True)
    return df


def sets_frame(workouts, index) -> pd.DataFrame:
    rows = []
    for w in workouts:
        completed = parse_timestamp(w.completed_at)
        if completed is None:
            continue
        for ex in w.exercises:
            muscle = index.muscle_for(ex.exercise_id)
            for i, s in enumerate(ex.sets, start=1):
                rows.append({
                    "workout_id": w.id,
                    "completed_at": pd.Timestamp(completed),
                    "date": pd.Timestamp(completed.date()),
                    "exercise_id": ex.exercise_id,
                    "exercise": index.display_name(ex.exercise_id, ex.exercise_name),
                    "muscle_group": muscle,
                    "set_num": i,
                    "set_type": s.set_type,
                    "weight_kg": float(s.weight),
                    "reps": int(s.reps),
                    "rpe": s.rpe,
                    "volume_kg": float(s.weight * s.reps),
                })
    df = pd.DataFrame(rows, columns=SET_COLUMNS)
    if not df.empty:
        df = df.sort_values("completed_at", kind="stable").reset_index(drop=True)
    return df
