"""
Workout scheduling logic.

Contains the lifecycle service, its collaborator interfaces, domain models
and the errors stores and notifiers raise.
"""

from .errors import (
    InvalidTransitionError,
    NotificationError,
    PersistenceError,
    WorkoutError,
    WorkoutNotFoundError,
)
from .models import RequestNewWorkout, UpdateWorkout, Workout, WorkoutStatus
from .service import NotificationGateway, WorkoutService, WorkoutStore

__all__ = [
    "InvalidTransitionError",
    "NotificationError",
    "PersistenceError",
    "WorkoutError",
    "WorkoutNotFoundError",
    "RequestNewWorkout",
    "UpdateWorkout",
    "Workout",
    "WorkoutStatus",
    "NotificationGateway",
    "WorkoutService",
    "WorkoutStore",
]
