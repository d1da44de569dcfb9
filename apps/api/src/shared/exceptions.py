# apps/api/src/shared/exceptions.py
from fastapi import HTTPException, status


class BaseHTTPException(HTTPException):
    """HTTP error whose status and default detail are declared on the class."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.message)


# Authentication & Authorization Exceptions
class InvalidTokenError(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        )


class PermissionDeniedError(BaseHTTPException):
    """The action is unavailable to the session regardless of the target."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Forbidden"


class InvalidUpdateError(PermissionDeniedError):
    """The mutated record would fall outside the session's UPDATE rules."""

    message = "Invalid update attempted"


class InvalidTransitionError(BaseHTTPException):
    """
    A status change rejected by the transition guard.

    Shares the forbidden status code with PermissionDeniedError but is a
    separate type with its own reason so callers can tell them apart.
    """

    status_code = status.HTTP_403_FORBIDDEN
    message = "Invalid status transition"
    reason = "invalid_transition"


# Resource Not Found Exceptions
class ResourceNotFoundError(BaseHTTPException):
    """The record does not exist or lies outside the visible set."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


# Validation / Request Exceptions
class InvalidDataError(HTTPException):
    def __init__(self, message: str = "Invalid request data") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


# Service Exceptions
class AbilityUnavailableError(BaseHTTPException):
    """Rules for the request could not be built."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    message = "Unable to resolve permissions"
