"""Custom exception classes for the MediaDash client."""

from typing import Optional


class MediaDashError(Exception):
    """
    Base exception class for all client-side errors.
    """
    pass


class ApiError(MediaDashError):
    """
    Raised when the backend answers with a non-success status.

    The message is the server's ``detail`` field when present, otherwise
    the raw body text or the status line.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ApiConnectionError(ApiError):
    """
    Raised when the backend cannot be reached at all.
    """
    pass


class PayloadError(MediaDashError):
    """
    Raised when a backend response does not match the expected schema.
    """
    pass


class UnsupportedMediaTypeError(MediaDashError):
    """
    Raised when a file's MIME type is not image/*, audio/* or video/*.
    """
    pass


class ValidationError(MediaDashError):
    """
    Raised when user input fails client-side validation.
    """
    pass


class MissingTokenError(MediaDashError):
    """
    Raised when login succeeds but the backend returns no access token.
    """
    pass
