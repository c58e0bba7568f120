"""
Errors raised by workout stores and notification gateways.

The service never wraps these. Whatever a collaborator raises reaches the
caller unchanged, so callers can tell a failed write from a failed email.
"""

from typing import Optional

from .models import WorkoutStatus


class WorkoutError(Exception):
    """Base class for workout scheduling errors."""
    pass


class PersistenceError(WorkoutError):
    """Raised when a workout store cannot complete an operation."""
    pass


class WorkoutNotFoundError(PersistenceError):
    """Raised when no workout exists with the requested id."""

    def __init__(self, workout_id: int) -> None:
        super().__init__(f"Workout {workout_id} not found")
        self.workout_id = workout_id


class InvalidTransitionError(PersistenceError):
    """Raised when a workout cannot move to the requested stage."""

    def __init__(
        self,
        workout_id: int,
        current: WorkoutStatus,
        target: WorkoutStatus,
    ) -> None:
        super().__init__(
            f"Workout {workout_id} cannot move from "
            f"{current.value} to {target.value}"
        )
        self.workout_id = workout_id
        self.current = current
        self.target = target


class NotificationError(WorkoutError):
    """Raised when a notification could not be delivered."""

    def __init__(self, message: str, template_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.template_id = template_id
