"""
Domain errors surfaced to API callers.

Each carries the HTTP status code the API layer should answer with; the
handler registered in app.main renders them as ``{"detail": message}``.
"""
from fastapi import status


class ServiceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(ServiceError):
    """Trip (or one of its owners) could not be found."""

    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(ServiceError):
    """Operation is not permitted in the trip's current state."""

    status_code = status.HTTP_400_BAD_REQUEST
