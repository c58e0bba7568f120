"""
FastAPI application entry point.

Run locally without Snowflake or SMTP:
    SNOWFLAKE_MOCK_MODE=true EMAIL_MOCK_MODE=true uvicorn workout_scheduler.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import error_status
from .api.routes import health, workouts
from .config.settings import get_settings
from .core.workouts.errors import WorkoutError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Report missing settings at startup. Mock-mode development still starts."""
    settings = get_settings()

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    logger.info(
        "Workout Scheduler API started",
        extra={
            "snowflake_mock_mode": settings.snowflake_mock_mode,
            "email_mock_mode": settings.email_mock_mode,
        }
    )
    yield


def create_app() -> FastAPI:
    settings = get_settings()

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=settings.log_level.upper(),
    )

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=(
            "Schedule workouts between athletes and coaches. "
            "A 502 response means the email failed; the workout change "
            "itself may already have been saved."
        ),
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(workouts.router, prefix="/api/v1/workouts", tags=["Workouts"])

    @app.exception_handler(WorkoutError)
    async def workout_error_handler(request: Request, exc: WorkoutError):
        """
        Map domain errors that escape a route.

        These come from dependencies, e.g. a Snowflake connection that
        fails while the workout store is being built.
        """
        status_code, detail = error_status(exc)
        logger.error(
            "Workout error outside route handler",
            extra={
                "path": request.url.path,
                "status_code": status_code,
                "error": str(exc),
            },
        )
        return JSONResponse(status_code=status_code, content={"detail": detail})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"}
        )

    return app


app = create_app()
