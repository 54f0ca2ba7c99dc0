"""
Domain errors raised by the services and translated to HTTP responses in main.py.

Every error carries the status code it maps to and a short message that is
returned to the client as ``{"error": message}``.
"""

from fastapi import status


class LedgerError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(LedgerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnauthenticatedError(LedgerError):
    """No session, or the credentials did not match."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidSessionError(LedgerError):
    """A token was presented but is malformed, expired or not ours."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid session"


class ForbiddenError(LedgerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(LedgerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(LedgerError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"
