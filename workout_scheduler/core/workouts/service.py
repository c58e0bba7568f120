"""
Workout lifecycle coordination.

This module decides what happens when a workout is requested, updated,
approved or completed: which store call is made, who gets emailed, and what
the caller sees when one of the two steps fails.

Every mutating operation is a plain two-step sequence: write to the store,
then notify. There is no transaction spanning both steps. If the email fails
after the write succeeded, the write stays and the caller gets the
NotificationError.
"""

import logging
from typing import Any, Optional, Protocol

from .errors import NotificationError, PersistenceError
from .models import RequestNewWorkout, UpdateWorkout, Workout, WorkoutStatus


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class WorkoutStore(Protocol):
    """
    Interface for workout persistence.

    The store owns the workout records and is the only thing that enforces
    lifecycle rules. Failures are raised as PersistenceError subclasses.
    """

    def fetch_workouts(self) -> list[Workout]:
        """Return every known workout."""
        ...

    def filter_workouts_by_athlete(self, athlete: str) -> list[Workout]:
        """Return workouts whose athlete matches exactly."""
        ...

    def filter_workouts_by_coach(self, coach: str) -> list[Workout]:
        """Return workouts whose coach matches exactly."""
        ...

    def new_workout(self, workout: Workout) -> Workout:
        """Persist a new workout and return it with its id assigned."""
        ...

    def update_workout(self, workout_id: int, workout: Workout) -> Workout:
        """Overwrite scheduled/description and return the stored workout."""
        ...

    def approve_workout(self, workout_id: int) -> Workout:
        """Move a workout to approved and return it."""
        ...

    def complete_workout(self, workout_id: int) -> None:
        """Move a workout to completed."""
        ...

    def ping(self) -> None:
        """Cheap availability check. Raises PersistenceError if the store is down."""
        ...


class NotificationGateway(Protocol):
    """
    Interface for delivering templated emails.

    Raises NotificationError when delivery fails.
    """

    def send_email(
        self,
        subject: str,
        recipients: list[str],
        template_id: str,
        template_data: Optional[dict[str, Any]] = None,
    ) -> None:
        ...


# ---------------------------------------------------------------------------
# Notification templates
# ---------------------------------------------------------------------------

WORKOUT_REQUESTED_TEMPLATE = "workoutRequested"
WORKOUT_UPDATED_TEMPLATE = "workoutUpdated"
WORKOUT_APPROVED_TEMPLATE = "workoutApproved"

WORKOUT_REQUESTED_SUBJECT = "A new workout has been requested"
WORKOUT_UPDATED_SUBJECT = "Your workout has been updated"
WORKOUT_APPROVED_SUBJECT = "Your workout has been approved"


# ---------------------------------------------------------------------------
# Workout Service
# ---------------------------------------------------------------------------

class WorkoutService:
    """
    Coordinates the workout lifecycle between a store and a notifier.

    The service keeps no state of its own beyond its two collaborators.
    It never caches workouts: whatever the store returns is what gets
    reported and what the notification is addressed from.

    It also does not check stages, schedule conflicts or past dates.
    Approving an unknown or completed workout is the store's call to reject.
    """

    def __init__(
        self,
        store: WorkoutStore,
        notifier: NotificationGateway,
    ) -> None:
        self._store = store
        self._notifier = notifier

    def all(self) -> list[Workout]:
        """
        Return all workouts in store order.

        Raises:
            PersistenceError: if the store cannot be read
        """
        return self._store.fetch_workouts()

    def get_by_athlete(self, athlete: str) -> list[Workout]:
        """Workouts for one athlete. Unknown or empty athlete gives []."""
        return self._store.filter_workouts_by_athlete(athlete)

    def get_by_coach(self, coach: str) -> list[Workout]:
        """Workouts for one coach. Unknown or empty coach gives []."""
        return self._store.filter_workouts_by_coach(coach)

    def request(self, new_workout: RequestNewWorkout) -> Workout:
        """
        Create a workout in the requested stage and email the coach.

        Nothing is validated: two identical requests create two workouts,
        and schedules in the past or overlapping others are accepted.

        Raises:
            PersistenceError: the workout was not created, nobody was emailed
            NotificationError: the workout WAS created but the coach was
                not told about it
        """
        workout = Workout(
            athlete=new_workout.athlete,
            coach=new_workout.coach,
            scheduled=new_workout.scheduled,
            status=WorkoutStatus.REQUESTED,
        )

        try:
            workout = self._store.new_workout(workout)
        except PersistenceError as e:
            logger.error(
                "Failed to create workout",
                extra={
                    "athlete": new_workout.athlete,
                    "coach": new_workout.coach,
                    "error": str(e),
                },
            )
            raise

        logger.info(
            "Workout requested",
            extra={"workout_id": workout.id, "coach": workout.coach},
        )

        self._notify(
            workout,
            subject=WORKOUT_REQUESTED_SUBJECT,
            recipients=[workout.coach],
            template_id=WORKOUT_REQUESTED_TEMPLATE,
        )
        return workout

    def update(self, workout_id: int, changes: UpdateWorkout) -> Workout:
        """
        Overwrite a workout's schedule and description, then email both parties.

        Only `scheduled` and `description` are sent to the store. The
        athlete and coach are left for the store to keep as they are.

        Raises:
            PersistenceError: nothing changed, nobody was emailed
            NotificationError: the change WAS saved but not announced
        """
        workout = Workout(
            scheduled=changes.scheduled,
            description=changes.description,
        )

        try:
            workout = self._store.update_workout(workout_id, workout)
        except PersistenceError as e:
            logger.error(
                "Failed to update workout",
                extra={"workout_id": workout_id, "error": str(e)},
            )
            raise

        logger.info("Workout updated", extra={"workout_id": workout_id})

        self._notify(
            workout,
            subject=WORKOUT_UPDATED_SUBJECT,
            recipients=workout.parties,
            template_id=WORKOUT_UPDATED_TEMPLATE,
        )
        return workout

    def approve(self, workout_id: int) -> None:
        """
        Approve a workout and email both parties.

        Unlike request and update, the approved workout is not returned.
        """
        try:
            workout = self._store.approve_workout(workout_id)
        except PersistenceError as e:
            logger.error(
                "Failed to approve workout",
                extra={"workout_id": workout_id, "error": str(e)},
            )
            raise

        logger.info("Workout approved", extra={"workout_id": workout_id})

        self._notify(
            workout,
            subject=WORKOUT_APPROVED_SUBJECT,
            recipients=workout.parties,
            template_id=WORKOUT_APPROVED_TEMPLATE,
        )

    def complete(self, workout_id: int) -> None:
        """
        Mark a workout completed.

        No email is sent for completion.
        """
        try:
            self._store.complete_workout(workout_id)
        except PersistenceError as e:
            logger.error(
                "Failed to complete workout",
                extra={"workout_id": workout_id, "error": str(e)},
            )
            raise

        logger.info("Workout completed", extra={"workout_id": workout_id})

    def _notify(
        self,
        workout: Workout,
        subject: str,
        recipients: list[str],
        template_id: str,
    ) -> None:
        """Send one email about a workout that has already been persisted."""
        try:
            self._notifier.send_email(
                subject,
                recipients,
                template_id,
                None,
            )
        except NotificationError as e:
            # The store write is not rolled back.
            logger.error(
                "Workout persisted but notification failed",
                extra={
                    "workout_id": workout.id,
                    "template_id": template_id,
                    "error": str(e),
                },
            )
            raise
