"""Application error types surfaced to API callers."""


class CalorieTrackerError(Exception):
    """Base error carrying a caller-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CalorieTrackerError):
    """Missing or malformed input."""


class Unauthorized(CalorieTrackerError):
    """Missing or invalid credentials."""


class Forbidden(CalorieTrackerError):
    """Role or ownership check failed."""


class NotFound(CalorieTrackerError):
    """Requested entity does not exist."""


class Conflict(CalorieTrackerError):
    """Entity collides with an existing one."""


class InternalError(CalorieTrackerError):
    """Unexpected failure, usually from persistence."""
