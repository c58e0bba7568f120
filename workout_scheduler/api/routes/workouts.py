"""
Workout API endpoints.

Thin HTTP layer over WorkoutService. Routes translate request bodies into
domain inputs, call one service method, and map domain errors to status
codes:

- WorkoutNotFoundError -> 404
- InvalidTransitionError -> 409
- any other PersistenceError -> 503
- NotificationError -> 502 (the change may already be saved)
"""

import logging
from datetime import datetime
from typing import NoReturn, Optional

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel, Field

from ...core.workouts.errors import WorkoutError
from ...core.workouts.models import RequestNewWorkout, UpdateWorkout, Workout
from ..dependencies import WorkoutServiceDep
from ..errors import error_status

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class RequestWorkoutBody(BaseModel):
    """Request a new workout."""
    athlete: str = Field(description="Athlete identifier (email address)", min_length=1)
    coach: str = Field(description="Coach identifier (email address)", min_length=1)
    scheduled: Optional[datetime] = Field(None, description="When the workout takes place")


class UpdateWorkoutBody(BaseModel):
    """
    Replace a workout's schedule and description.

    Omitted fields are cleared, not kept.
    """
    scheduled: Optional[datetime] = Field(None, description="New time for the workout")
    description: str = Field("", description="New description", max_length=2000)


class WorkoutResponse(BaseModel):
    """A workout as returned by the API."""
    id: int = Field(description="Workout identifier")
    athlete: str = Field(description="Athlete identifier")
    coach: str = Field(description="Coach identifier")
    scheduled: Optional[datetime] = Field(None, description="When the workout takes place")
    description: str = Field("", description="Free-text description")
    status: str = Field(description="Lifecycle stage: requested, approved or completed")

    @classmethod
    def from_workout(cls, workout: Workout) -> "WorkoutResponse":
        return cls(
            id=workout.id,
            athlete=workout.athlete,
            coach=workout.coach,
            scheduled=workout.scheduled,
            description=workout.description,
            status=workout.status.value,
        )


def _raise_http_error(error: WorkoutError) -> NoReturn:
    """Map a domain error onto an HTTPException."""
    status_code, detail = error_status(error)
    raise HTTPException(status_code=status_code, detail=detail) from error


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[WorkoutResponse],
    summary="List workouts",
)
async def list_workouts(service: WorkoutServiceDep) -> list[WorkoutResponse]:
    try:
        workouts = service.all()
    except WorkoutError as e:
        _raise_http_error(e)
    return [WorkoutResponse.from_workout(w) for w in workouts]


@router.get(
    "/athletes/{athlete}",
    response_model=list[WorkoutResponse],
    summary="List an athlete's workouts",
)
async def list_athlete_workouts(
    athlete: str,
    service: WorkoutServiceDep,
) -> list[WorkoutResponse]:
    try:
        workouts = service.get_by_athlete(athlete)
    except WorkoutError as e:
        _raise_http_error(e)
    return [WorkoutResponse.from_workout(w) for w in workouts]


@router.get(
    "/coaches/{coach}",
    response_model=list[WorkoutResponse],
    summary="List a coach's workouts",
)
async def list_coach_workouts(
    coach: str,
    service: WorkoutServiceDep,
) -> list[WorkoutResponse]:
    try:
        workouts = service.get_by_coach(coach)
    except WorkoutError as e:
        _raise_http_error(e)
    return [WorkoutResponse.from_workout(w) for w in workouts]


@router.post(
    "",
    response_model=WorkoutResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a workout",
    description="Create a workout in the requested stage and email the coach",
)
async def request_workout(
    body: RequestWorkoutBody,
    service: WorkoutServiceDep,
) -> WorkoutResponse:
    logger.info(
        "Workout request received",
        extra={"athlete": body.athlete, "coach": body.coach}
    )

    try:
        workout = service.request(RequestNewWorkout(
            athlete=body.athlete,
            coach=body.coach,
            scheduled=body.scheduled,
        ))
    except WorkoutError as e:
        _raise_http_error(e)

    return WorkoutResponse.from_workout(workout)


@router.put(
    "/{workout_id}",
    response_model=WorkoutResponse,
    summary="Update a workout",
    description="Overwrite schedule and description, then email coach and athlete",
)
async def update_workout(
    workout_id: int,
    body: UpdateWorkoutBody,
    service: WorkoutServiceDep,
) -> WorkoutResponse:
    try:
        workout = service.update(workout_id, UpdateWorkout(
            scheduled=body.scheduled,
            description=body.description,
        ))
    except WorkoutError as e:
        _raise_http_error(e)

    return WorkoutResponse.from_workout(workout)


@router.post(
    "/{workout_id}/approve",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Approve a workout",
)
async def approve_workout(workout_id: int, service: WorkoutServiceDep) -> Response:
    try:
        service.approve(workout_id)
    except WorkoutError as e:
        _raise_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{workout_id}/complete",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Complete a workout",
)
async def complete_workout(workout_id: int, service: WorkoutServiceDep) -> Response:
    try:
        service.complete(workout_id)
    except WorkoutError as e:
        _raise_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
