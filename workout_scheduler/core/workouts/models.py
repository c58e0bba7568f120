"""
Domain models for workout scheduling.

A workout is a session agreed between an athlete and a coach. These models
carry no knowledge of how they are stored or how anyone gets notified about
them; stores and notifiers translate to and from them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class WorkoutStatus(Enum):
    """
    Lifecycle stage of a workout.

    Stages only move forward: requested -> approved -> completed.
    There is no rejected or cancelled stage.
    """
    REQUESTED = "requested"
    APPROVED = "approved"
    COMPLETED = "completed"

    @property
    def next_status(self) -> Optional["WorkoutStatus"]:
        """The stage this one advances to, or None if it is final."""
        return _NEXT_STATUS.get(self)

    def can_advance_to(self, target: "WorkoutStatus") -> bool:
        return self.next_status is target


_NEXT_STATUS = {
    WorkoutStatus.REQUESTED: WorkoutStatus.APPROVED,
    WorkoutStatus.APPROVED: WorkoutStatus.COMPLETED,
}


@dataclass
class Workout:
    """
    A scheduled session between an athlete and a coach.

    `id` stays None until a store persists the workout. Once assigned it
    never changes, and neither do `athlete` and `coach`: updates only touch
    `scheduled` and `description`.
    """
    id: Optional[int] = None
    athlete: str = ""
    coach: str = ""
    scheduled: Optional[datetime] = None
    description: str = ""
    status: WorkoutStatus = WorkoutStatus.REQUESTED

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    @property
    def parties(self) -> list[str]:
        """Coach first, then athlete. This is the order notifications use."""
        return [self.coach, self.athlete]


@dataclass(frozen=True)
class RequestNewWorkout:
    """Input for requesting a new workout. No description or status yet."""
    athlete: str
    coach: str
    scheduled: Optional[datetime] = None


@dataclass(frozen=True)
class UpdateWorkout:
    """
    Input for updating a workout.

    Both fields overwrite what is stored: a missing `scheduled` clears the
    schedule and an empty `description` clears the description.
    """
    scheduled: Optional[datetime] = None
    description: str = ""
