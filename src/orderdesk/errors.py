"""
orderdesk.errors

Error taxonomy shared by every service.

Responsibilities:
- Carry an HTTP status, a canonical error code and a client-safe message.
- Let domain code raise typed failures without importing FastAPI.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code: int = 500
    code: str = "INTERNAL"
    message: str = "Server error"

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        self.message = message or self.message
        if code is not None:
            self.code = code
        super().__init__(self.message)


class ValidationFailed(ServiceError):
    status_code = 400
    code = "VALIDATION_ERROR"
    message = "Invalid request"


class Unauthenticated(ServiceError):
    status_code = 401
    code = "UNAUTHORIZED"
    message = "Authentication required"


class InvalidCredentials(Unauthenticated):
    code = "INVALID_CREDENTIALS"
    message = "Invalid email or password"


class Forbidden(ServiceError):
    status_code = 403
    code = "FORBIDDEN"
    message = "Access denied"


class NotFound(ServiceError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Not found"


class Conflict(ServiceError):
    status_code = 409
    code = "CONFLICT"
    message = "Conflict"


class UpstreamError(ServiceError):
    status_code = 502
    code = "UPSTREAM"
    message = "Upstream error"


class Internal(ServiceError):
    pass


class StorageError(Internal):
    # Unreadable/corrupt persisted state; never "record absent".
    pass
