"""
Error taxonomy for the employee service.

Every failure that reaches the HTTP layer is an ``ApiError`` carrying a status
code and a human-readable message. The exception handlers in ``main`` render
them as ``{"statusCode", "message", "success": false}``.
"""

from fastapi import status


class ApiError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status_code={self.status_code}, message={self.message!r})"


class BadRequestError(ApiError):
    """Client input, validation or uniqueness failure."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(ApiError):
    """Missing, invalid or mismatched credentials or tokens."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized request"


class ForbiddenError(ApiError):
    """Valid identity, but the account may not proceed (e.g. inactive)."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InternalServerError(ApiError):
    """Unexpected store or collaborator failure. Message stays opaque."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
