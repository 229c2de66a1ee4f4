"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from calorie_tracker.api.food_entries import router as food_entries_router
from calorie_tracker.api.users import router as users_router
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.errors import (
    CalorieTrackerError,
    Conflict,
    Forbidden,
    InternalError,
    NotFound,
    Unauthorized,
    ValidationError,
)

# Forbidden keeps the 401 the service has always answered with.
_STATUS_CODES: dict[type[CalorieTrackerError], int] = {
    ValidationError: 400,
    Unauthorized: 401,
    Forbidden: 401,
    NotFound: 404,
    Conflict: 409,
    InternalError: 500,
}


def status_code_for(error: CalorieTrackerError) -> int:
    """Return the HTTP status for an application error."""
    for error_type in type(error).__mro__:
        if error_type in _STATUS_CODES:
            return _STATUS_CODES[error_type]
    return 500


def describe_validation_error(exc: RequestValidationError) -> str:
    """Summarize the first invalid request field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"Invalid value for {location}: {first.get('msg', 'invalid')}"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Calorie Tracker")
    app.state.container = container

    app.include_router(food_entries_router)
    app.include_router(users_router)

    @app.exception_handler(CalorieTrackerError)
    async def handle_app_error(
        request: Request, exc: CalorieTrackerError
    ) -> JSONResponse:
        status_code = status_code_for(exc)
        if status_code >= 500:  # noqa: PLR2004
            logger.error("Request failed: %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400, content={"message": describe_validation_error(exc)}
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(
            "Unhandled error: %s %s", request.method, request.url.path, exc_info=exc
        )
        return JSONResponse(
            status_code=500, content={"message": "Internal server error"}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
