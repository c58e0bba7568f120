"""
HTTP status mapping for workout errors.

Used by the workout routes and by the application-level handler, which
catches errors raised while dependencies are being built (for example a
Snowflake connection that can't be opened) before any route runs.
"""

from fastapi import status

from ..core.workouts.errors import (
    InvalidTransitionError,
    NotificationError,
    PersistenceError,
    WorkoutError,
    WorkoutNotFoundError,
)


def error_status(error: WorkoutError) -> tuple[int, str]:
    """Return (status code, detail) for a domain error."""
    if isinstance(error, WorkoutNotFoundError):
        return status.HTTP_404_NOT_FOUND, str(error)
    if isinstance(error, InvalidTransitionError):
        return status.HTTP_409_CONFLICT, str(error)
    if isinstance(error, NotificationError):
        return (
            status.HTTP_502_BAD_GATEWAY,
            f"Notification failed; the change may already be saved: {error}",
        )
    if isinstance(error, PersistenceError):
        return status.HTTP_503_SERVICE_UNAVAILABLE, f"Workout store error: {error}"
    return status.HTTP_500_INTERNAL_SERVER_ERROR, str(error)
