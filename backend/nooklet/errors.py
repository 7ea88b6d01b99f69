"""Domain errors raised by services and mapped to HTTP status codes by routers."""

from fastapi import status


class NookletError(Exception):
    """Base error carrying a fixed machine-readable code."""

    code = "NOOKLET_ERROR"
    message = "Nooklet error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ProfileNotFoundError(NookletError, LookupError):
    """The authenticated identity has no owning profile."""

    code = "PROFILE_NOT_FOUND"
    message = "Profile not found"


class NookletNotFoundError(NookletError, LookupError):
    """No nooklet with this id belongs to the owner.

    Missing rows and rows owned by another profile raise the same error.
    """

    code = "NOOKLET_NOT_FOUND"
    message = "Nooklet not found"


class InvalidPublishedAtError(NookletError, ValueError):
    """A publishedAt value could not be parsed as ISO-8601."""

    code = "INVALID_PUBLISHED_AT"
    message = "Invalid publishedAt value"


class AuthError(NookletError):
    """Authentication or registration failure with its HTTP status."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: int = status.HTTP_401_UNAUTHORIZED,
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
