"""
Obsessed Analytics — Read-only snapshots of store documents.

The workout store owns these records; analytics never mutates them. The
`from_dict` constructors accept the store's camelCase document shape and are
forgiving: missing numbers become 0, missing lists become empty.
"""
import math
from dataclasses import dataclass
from typing import Any, Optional

from obsessed_analytics.config import UNKNOWN_MUSCLE


def _number(value, default=0.0) -> float:
    try:
        n = float(value)
    except (TypeError, ValueError):
        return default
    return n if math.isfinite(n) else default


@dataclass(frozen=True)
class SetEntry:
    weight: float = 0.0
    reps: int = 0
    rpe: Optional[float] = None
    set_type: str = "normal"

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    @classmethod
    def from_dict(cls, d: dict) -> "SetEntry":
        rpe = d.get("rpe")
        rpe = _number(rpe, None) if rpe is not None else None
        # Out-of-range RPE is dropped, not clamped
        if rpe is not None and not 1 <= rpe <= 10:
            rpe = None
        return cls(
            weight=max(0.0, _number(d.get("weight"))),
            reps=max(0, int(_number(d.get("reps")))),
            rpe=rpe,
            set_type=d.get("type") or d.get("setType") or "normal",
        )


@dataclass(frozen=True)
class ExerciseEntry:
    exercise_id: str = ""
    exercise_name: str = ""
    sets: tuple[SetEntry, ...] = ()

    @classmethod
    def from_dict(cls, d: dict) -> "ExerciseEntry":
        return cls(
            exercise_id=d.get("exerciseId") or "",
            exercise_name=d.get("exerciseName") or d.get("name") or "",
            sets=tuple(SetEntry.from_dict(s) for s in d.get("sets") or []),
        )


@dataclass(frozen=True)
class WorkoutRecord:
    id: str
    status: str = "active"
    started_at: Any = None
    completed_at: Any = None
    exercises: tuple[ExerciseEntry, ...] = ()
    duration: float = 0.0
    total_volume: Optional[float] = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @classmethod
    def from_dict(cls, d: dict) -> "WorkoutRecord":
        total = d.get("totalVolume")
        return cls(
            id=str(d.get("id", "")),
            status=d.get("status") or "active",
            started_at=d.get("startedAt"),
            completed_at=d.get("completedAt"),
            exercises=tuple(ExerciseEntry.from_dict(e) for e in d.get("exercises") or []),
            duration=_number(d.get("duration")),
            total_volume=_number(total, None) if total is not None else None,
        )


@dataclass(frozen=True)
class ExerciseCatalogEntry:
    id: str
    name: str = ""
    muscle_group: str = UNKNOWN_MUSCLE

    @classmethod
    def from_dict(cls, d: dict) -> "ExerciseCatalogEntry":
        return cls(
            id=str(d.get("id", "")),
            name=d.get("name") or "",
            muscle_group=d.get("muscleGroup") or UNKNOWN_MUSCLE,
        )
