"""Typed service errors. Every failure the services expect to raise has an ErrorKind."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of expected failure kinds."""

    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    VALIDATION = "VALIDATION_ERROR"


# One entry per ErrorKind; tests assert the mapping is exhaustive.
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.VALIDATION: 422,
}


class ServiceError(Exception):
    """Base for expected failures; the API layer turns these into responses."""

    kind: ErrorKind
    default_message = "Request failed"

    def __init__(self, message: str | None = None, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class UnauthorizedError(ServiceError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized access"


class ForbiddenError(ServiceError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Access forbidden"


class NotFoundError(ServiceError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found"


class ConflictError(ServiceError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists"


class ValidationError(ServiceError):
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input"
