"""
In-memory workout store.

Used when snowflake_mock_mode is on and throughout the tests. It implements
the WorkoutStore protocol with a dict and a lock, and enforces the same
lifecycle rules the Snowflake repository does.

Not suitable for production: data lives only as long as the process.
"""

import logging
import threading
from dataclasses import replace
from typing import Callable, Optional

from workout_scheduler.core.workouts.errors import (
    InvalidTransitionError,
    WorkoutNotFoundError,
)
from workout_scheduler.core.workouts.models import Workout, WorkoutStatus


logger = logging.getLogger(__name__)


class InMemoryWorkoutStore:
    """
    Dict-backed WorkoutStore.

    Ids are assigned sequentially starting at 1. Every method hands out
    copies so callers can't mutate stored records behind the store's back.
    """

    def __init__(self, workouts: Optional[list[Workout]] = None) -> None:
        self._workouts: dict[int, Workout] = {}
        self._next_id = 1
        self._lock = threading.Lock()

        for workout in workouts or []:
            self.new_workout(workout)

        logger.info("Initialized in-memory workout store")

    def fetch_workouts(self) -> list[Workout]:
        return self._select(lambda w: True)

    def filter_workouts_by_athlete(self, athlete: str) -> list[Workout]:
        return self._select(lambda w: w.athlete == athlete)

    def filter_workouts_by_coach(self, coach: str) -> list[Workout]:
        return self._select(lambda w: w.coach == coach)

    def new_workout(self, workout: Workout) -> Workout:
        with self._lock:
            stored = replace(workout, id=self._next_id)
            self._workouts[stored.id] = stored
            self._next_id += 1

        logger.debug("Stored new workout", extra={"workout_id": stored.id})
        return replace(stored)

    def update_workout(self, workout_id: int, workout: Workout) -> Workout:
        """
        Overwrite scheduled and description.

        Parties, id and stage are kept from the stored record. Updates are
        accepted at any stage.
        """
        with self._lock:
            current = self._get(workout_id)
            stored = replace(
                current,
                scheduled=workout.scheduled,
                description=workout.description,
            )
            self._workouts[workout_id] = stored
        return replace(stored)

    def approve_workout(self, workout_id: int) -> Workout:
        return self._advance(workout_id, WorkoutStatus.APPROVED)

    def complete_workout(self, workout_id: int) -> None:
        self._advance(workout_id, WorkoutStatus.COMPLETED)

    def ping(self) -> None:
        pass

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    def _get(self, workout_id: int) -> Workout:
        """Look up a stored workout. Caller must hold the lock."""
        try:
            return self._workouts[workout_id]
        except KeyError:
            raise WorkoutNotFoundError(workout_id) from None

    def _advance(self, workout_id: int, target: WorkoutStatus) -> Workout:
        with self._lock:
            current = self._get(workout_id)
            if not current.status.can_advance_to(target):
                raise InvalidTransitionError(workout_id, current.status, target)
            stored = replace(current, status=target)
            self._workouts[workout_id] = stored

        logger.debug(
            "Advanced workout",
            extra={"workout_id": workout_id, "status": target.value},
        )
        return replace(stored)

    def _select(self, predicate: Callable[[Workout], bool]) -> list[Workout]:
        with self._lock:
            return [
                replace(w)
                for _, w in sorted(self._workouts.items())
                if predicate(w)
            ]
