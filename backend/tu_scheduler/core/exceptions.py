class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

class ScheduleValidationError(AppError):
    """Raised when a proposed assignment is malformed (bad time, bad day, start >= end)."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status_code=400, details=details)

class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id):
        super().__init__(f"{resource_type} with id {resource_id} not found", status_code=404)

class ScheduleConflictError(AppError):
    """Raised when a schedule record cannot be saved because it collides with others."""
    def __init__(self, conflicts: list[dict]):
        super().__init__(
            "Schedule conflicts detected",
            status_code=409,
            details={"conflicts": conflicts},
        )

class ConflictQueryError(AppError):
    """Raised when the schedule store could not be queried.

    Distinguishes "could not determine conflicts" from "no conflicts".
    """
    def __init__(self, message: str = "Could not determine conflicts"):
        super().__init__(message, status_code=503)

class SearchAbortedError(AppError):
    """Raised when a caller aborts a suggestion or auto-resolve search midway."""
    def __init__(self, message: str = "Search aborted before completion"):
        super().__init__(message, status_code=503)
