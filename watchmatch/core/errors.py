"""Error taxonomy shared by storage, services and the HTTP layer.

Each error carries the HTTP status it is rendered with, so route handlers
can let them propagate and the application exception handler does the
mapping in one place.
"""

from fastapi import status


class WatchMatchError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.__class__.__name__


class Unauthenticated(WatchMatchError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(WatchMatchError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidInput(WatchMatchError):
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamFailure(WatchMatchError):
    """The movie catalog could not be reached or answered with an error."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
