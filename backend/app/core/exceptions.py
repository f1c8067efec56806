"""Application error taxonomy.

Services raise these; the handler registered in ``app.main`` turns them into
the JSON error body returned to clients.
"""

from __future__ import annotations

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.error
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "Unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "Forbidden"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "Not Found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    error = "Conflict"


class InvalidEvent(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    error = "Bad Request"


class ServiceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    error = "Service Unavailable"
