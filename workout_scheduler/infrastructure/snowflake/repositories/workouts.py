"""
Snowflake repository for workouts.

This module implements the WorkoutStore protocol on top of a Snowflake
connection. The repository:
1. Translates between Workout models and rows in the workouts table
2. Encapsulates all SQL queries
3. Enforces forward-only lifecycle transitions with guarded UPDATEs

Driver errors are re-raised as PersistenceError so the service never has
to know which database sits behind it.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, Optional, Protocol

from workout_scheduler.core.workouts.errors import (
    InvalidTransitionError,
    PersistenceError,
    WorkoutNotFoundError,
)
from workout_scheduler.core.workouts.models import Workout, WorkoutStatus


logger = logging.getLogger(__name__)


WORKOUTS_SCHEMA_DDL = (
    """
    CREATE SEQUENCE IF NOT EXISTS workouts_id_seq START = 1 INCREMENT = 1
    """,
    """
    CREATE TABLE IF NOT EXISTS workouts (
        workout_id INTEGER NOT NULL PRIMARY KEY,
        athlete VARCHAR NOT NULL,
        coach VARCHAR NOT NULL,
        scheduled_at TIMESTAMP_NTZ,
        description VARCHAR DEFAULT '',
        status VARCHAR NOT NULL DEFAULT 'requested',
        created_at TIMESTAMP_NTZ DEFAULT CURRENT_TIMESTAMP(),
        updated_at TIMESTAMP_NTZ DEFAULT CURRENT_TIMESTAMP()
    )
    """,
)

_SELECT_WORKOUTS = """
    SELECT workout_id, athlete, coach, scheduled_at, description, status
    FROM workouts
"""


class SnowflakeConnection(Protocol):
    """
    Protocol for Snowflake connections.

    Using a protocol means tests can provide a fake without
    importing the actual snowflake-connector-python.
    """

    def cursor(self): ...
    def commit(self) -> None: ...


@dataclass
class SnowflakeConfig:
    """Configuration for Snowflake connection."""
    account: str
    user: str
    password: Optional[str] = None
    private_key_path: Optional[str] = None
    database: str = "SCHEDULING"
    schema: str = "WORKOUTS"
    warehouse: str = "COMPUTE_WH"
    role: Optional[str] = None


class SnowflakeWorkoutRepository:
    """
    Repository for workout persistence.

    Each public method corresponds to one operation of the WorkoutStore
    protocol. Lifecycle changes use `UPDATE ... WHERE status = <previous>`
    so an illegal transition changes no rows; the repository then looks the
    workout up to report whether it was missing or in the wrong stage.
    """

    def __init__(self, connection: SnowflakeConnection) -> None:
        self._conn = connection

    def fetch_workouts(self) -> list[Workout]:
        with self._cursor() as cursor:
            cursor.execute(_SELECT_WORKOUTS + " ORDER BY workout_id")
            return [self._build_workout(row) for row in cursor.fetchall()]

    def filter_workouts_by_athlete(self, athlete: str) -> list[Workout]:
        with self._cursor() as cursor:
            cursor.execute(
                _SELECT_WORKOUTS + " WHERE athlete = %s ORDER BY workout_id",
                (athlete,),
            )
            return [self._build_workout(row) for row in cursor.fetchall()]

    def filter_workouts_by_coach(self, coach: str) -> list[Workout]:
        with self._cursor() as cursor:
            cursor.execute(
                _SELECT_WORKOUTS + " WHERE coach = %s ORDER BY workout_id",
                (coach,),
            )
            return [self._build_workout(row) for row in cursor.fetchall()]

    def new_workout(self, workout: Workout) -> Workout:
        """
        Insert a workout and return it with its id.

        Snowflake has no INSERT ... RETURNING, so the id is drawn from the
        sequence first and inserted explicitly.
        """
        with self._cursor() as cursor:
            cursor.execute("SELECT workouts_id_seq.NEXTVAL")
            workout_id = cursor.fetchone()[0]

            cursor.execute("""
                INSERT INTO workouts (
                    workout_id, athlete, coach, scheduled_at, description, status
                ) VALUES (%s, %s, %s, %s, %s, %s)
            """, (
                workout_id,
                workout.athlete,
                workout.coach,
                workout.scheduled,
                workout.description,
                workout.status.value,
            ))
            self._conn.commit()

        logger.debug("Inserted workout", extra={"workout_id": workout_id})

        return Workout(
            id=workout_id,
            athlete=workout.athlete,
            coach=workout.coach,
            scheduled=workout.scheduled,
            description=workout.description,
            status=workout.status,
        )

    def update_workout(self, workout_id: int, workout: Workout) -> Workout:
        """Overwrite scheduled and description. Parties are left alone."""
        with self._cursor() as cursor:
            cursor.execute("""
                UPDATE workouts
                SET scheduled_at = %s,
                    description = %s,
                    updated_at = CURRENT_TIMESTAMP()
                WHERE workout_id = %s
            """, (workout.scheduled, workout.description, workout_id))

            if cursor.rowcount == 0:
                raise WorkoutNotFoundError(workout_id)

            self._conn.commit()
            return self._fetch_one(cursor, workout_id)

    def approve_workout(self, workout_id: int) -> Workout:
        with self._cursor() as cursor:
            self._advance(cursor, workout_id, WorkoutStatus.APPROVED)
            return self._fetch_one(cursor, workout_id)

    def complete_workout(self, workout_id: int) -> None:
        with self._cursor() as cursor:
            self._advance(cursor, workout_id, WorkoutStatus.COMPLETED)

    def ping(self) -> None:
        """Run SELECT 1 without touching the workouts table."""
        with self._cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()

    def create_schema(self) -> None:
        """Create the workouts sequence and table if they don't exist."""
        with self._cursor() as cursor:
            for statement in WORKOUTS_SCHEMA_DDL:
                cursor.execute(statement)
            self._conn.commit()

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    @contextmanager
    def _cursor(self) -> Generator:
        """
        Provide a cursor and translate driver failures.

        Our own PersistenceErrors pass through untouched; anything else
        raised by the driver becomes a PersistenceError.
        """
        cursor = self._conn.cursor()
        try:
            yield cursor
        except PersistenceError:
            raise
        except Exception as e:
            logger.error(
                "Snowflake workout query failed",
                extra={"error": str(e)}
            )
            raise PersistenceError(f"Workout store unavailable: {e}") from e
        finally:
            cursor.close()

    def _advance(self, cursor, workout_id: int, target: WorkoutStatus) -> None:
        """Move a workout to `target`, only from the stage right before it."""
        previous = next(s for s in WorkoutStatus if s.next_status is target)

        cursor.execute("""
            UPDATE workouts
            SET status = %s,
                updated_at = CURRENT_TIMESTAMP()
            WHERE workout_id = %s AND status = %s
        """, (target.value, workout_id, previous.value))

        if cursor.rowcount == 0:
            cursor.execute(
                "SELECT status FROM workouts WHERE workout_id = %s",
                (workout_id,),
            )
            row = cursor.fetchone()
            if not row:
                raise WorkoutNotFoundError(workout_id)
            raise InvalidTransitionError(workout_id, WorkoutStatus(row[0]), target)

        self._conn.commit()

    def _fetch_one(self, cursor, workout_id: int) -> Workout:
        cursor.execute(_SELECT_WORKOUTS + " WHERE workout_id = %s", (workout_id,))
        row = cursor.fetchone()
        if not row:
            raise WorkoutNotFoundError(workout_id)
        return self._build_workout(row)

    def _build_workout(self, row) -> Workout:
        """Construct a Workout from a workouts row."""
        return Workout(
            id=int(row[0]),
            athlete=row[1],
            coach=row[2],
            scheduled=row[3],
            description=row[4] or "",
            status=WorkoutStatus(row[5]) if row[5] else WorkoutStatus.REQUESTED,
        )
