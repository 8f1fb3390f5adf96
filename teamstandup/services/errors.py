"""Typed service errors.

Services raise these for known conditions; the HTTP layer turns them into
``{status, message, error: {code, details}}`` bodies.
"""

from typing import Any, Optional


class ServiceError(Exception):
    """Base exception for service errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, error_code: Optional[str] = None, details: Any = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    status_code = 400
    error_code = "VALIDATION_ERROR"


class Unauthorized(ServiceError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class NotFound(ServiceError):
    status_code = 404
    error_code = "NOT_FOUND"


class Conflict(ServiceError):
    status_code = 409
    error_code = "CONFLICT"


class InternalError(ServiceError):
    status_code = 500
    error_code = "INTERNAL_ERROR"
