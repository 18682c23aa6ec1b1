"""Generic application errors."""

from fastapi import status

from dlama.config.errors import ErrorCode

__all__ = ["AppError", "ETagError"]


class AppError(Exception):
    """Base exception for errors reported to the client.

    Subclasses set ``error_code`` and ``status_code``; ``message`` is the
    default text and can be replaced per instance.
    """

    error_code = ErrorCode.SERVER_ERROR
    message = "An unexpected error occurred"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        """Initialize with optional custom message."""
        if message:
            self.message = message
        super().__init__(self.message)


class ETagError(AppError):
    """Optimistic locking failure that reports the current version as ETag."""

    error_code = ErrorCode.VERSION_MISMATCH
    message = "ETag mismatch"
    status_code = status.HTTP_412_PRECONDITION_FAILED

    def __init__(self, version: int, message: str | None = None) -> None:
        """Initialize with the current version and an optional custom message."""
        self.version = version
        super().__init__(message)
