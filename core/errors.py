"""
Error taxonomy shared by the guard, the lifecycle and the unit of work.

Components raise these locally; main.py maps each kind to an HTTP response
in one place.
"""
from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class AppError(Exception):
    kind = ErrorKind.INTERNAL
    default_detail = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION
    default_detail = "Invalid request"


class Unauthorized(AppError):
    kind = ErrorKind.UNAUTHORIZED
    default_detail = "Invalid token"


class Forbidden(AppError):
    kind = ErrorKind.FORBIDDEN
    default_detail = "You are not allowed to access this resource"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "Not found"


class Conflict(AppError):
    kind = ErrorKind.CONFLICT
    default_detail = "Request conflicts with the current state"


class InvalidTransition(Conflict):
    default_detail = "Invalid status transition"


class ConcurrencyConflict(Conflict):
    default_detail = "The record was modified by another request, please retry"


class PersistenceError(AppError):
    kind = ErrorKind.INTERNAL
