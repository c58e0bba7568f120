"""
FastAPI dependency injection.

Dependencies provide instances of services, stores, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden for testing
- Configuration is centralized
- Resource lifecycle (connections) is managed properly

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated, Generator, Optional, Union

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.workouts.service import NotificationGateway, WorkoutService, WorkoutStore
from ..infrastructure.mail.client import (
    EmailConfig,
    MockEmailNotifier,
    SmtpEmailNotifier,
    create_email_notifier,
)
from ..infrastructure.memory.workouts import InMemoryWorkoutStore
from ..infrastructure.snowflake.client import get_snowflake_connection
from ..infrastructure.snowflake.repositories.workouts import (
    SnowflakeConfig,
    SnowflakeWorkoutRepository,
)

logger = logging.getLogger(__name__)

# Global mock instances (shared across requests so data survives between them)
_mock_workout_store: Optional[InMemoryWorkoutStore] = None
_mock_email_notifier: Optional[MockEmailNotifier] = None


# ---------------------------------------------------------------------------
# Collaborator Dependencies
# ---------------------------------------------------------------------------

def get_workout_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Generator[WorkoutStore, None, None]:
    """
    Provide a WorkoutStore for the request.

    This is a generator function (yields instead of returns) because
    the Snowflake connection has to be closed after the request.

    In mock mode, we reuse the same in-memory store across requests
    so that workouts persist during the process lifetime.
    """
    global _mock_workout_store

    if settings.snowflake_mock_mode:
        if _mock_workout_store is None:
            _mock_workout_store = InMemoryWorkoutStore()
            logger.info("Created shared in-memory workout store")
        yield _mock_workout_store
        return

    config = SnowflakeConfig(
        account=settings.snowflake_account,
        user=settings.snowflake_user,
        password=settings.snowflake_password or None,
        private_key_path=settings.snowflake_private_key_path,
        database=settings.snowflake_database,
        schema=settings.snowflake_schema,
        warehouse=settings.snowflake_warehouse,
        role=settings.snowflake_role,
    )

    with get_snowflake_connection(config) as conn:
        logger.debug("Created SnowflakeWorkoutRepository with Snowflake connection")
        yield SnowflakeWorkoutRepository(conn)


def get_email_notifier(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Union[SmtpEmailNotifier, MockEmailNotifier]:
    """
    Provide the notification gateway.

    Returns either the SMTP notifier or a shared mock based on settings.
    """
    global _mock_email_notifier

    if settings.email_mock_mode:
        if _mock_email_notifier is None:
            _mock_email_notifier = create_email_notifier(mock_mode=True)
            logger.info("Created shared mock email notifier")
        return _mock_email_notifier

    config = EmailConfig(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
        from_address=settings.email_from_address,
    )
    return create_email_notifier(config=config)


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_workout_service(
    store: Annotated[WorkoutStore, Depends(get_workout_store)],
    notifier: Annotated[NotificationGateway, Depends(get_email_notifier)],
) -> WorkoutService:
    """
    Provide a WorkoutService wired to this request's collaborators.

    The service is stateless, so we create a new instance per request.
    """
    return WorkoutService(store=store, notifier=notifier)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
WorkoutServiceDep = Annotated[WorkoutService, Depends(get_workout_service)]
WorkoutStoreDep = Annotated[WorkoutStore, Depends(get_workout_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
