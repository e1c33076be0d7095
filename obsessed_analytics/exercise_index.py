"""
Obsessed Analytics — Exercise Index

id -> muscle group lookup built once per catalog snapshot, so aggregation
loops never scan the catalog.
"""
from obsessed_analytics.config import UNKNOWN_MUSCLE


class ExerciseIndex:
    def __init__(self, catalog=()):
        self._muscles: dict[str, str] = {}
        self._names: dict[str, str] = {}
        for entry in catalog:
            self._muscles[entry.id] = entry.muscle_group or UNKNOWN_MUSCLE
            self._names[entry.id] = entry.name

    def __len__(self) -> int:
        return len(self._muscles)

    def __contains__(self, exercise_id) -> bool:
        return exercise_id in self._muscles

    def muscle_for(self, exercise_id) -> str:
        return self._muscles.get(exercise_id, UNKNOWN_MUSCLE)

    def display_name(self, exercise_id, logged_name: str = "") -> str:
        """Name as logged in the session, else the catalog's, else the id."""
        return logged_name or self._names.get(exercise_id) or exercise_id or ""
