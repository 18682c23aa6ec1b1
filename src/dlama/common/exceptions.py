"""Common exceptions."""

from fastapi import status

from dlama.common.app_error import AppError, ETagError
from dlama.config.errors import ErrorCode, ErrorNames

__all__ = [
    "InvalidFileError",
    "NotFoundError",
    "VersionMismatchError",
    "VersionMissingError",
]


class NotFoundError(AppError):
    """Exception raised when something is not found."""

    error_code = ErrorCode.NOT_FOUND
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidFileError(AppError):
    """Exception raised when no usable file was uploaded."""

    error_code = ErrorCode.INVALID_FILE
    message = ErrorNames.FILE_MISSING_ERROR
    status_code = status.HTTP_400_BAD_REQUEST


class VersionMismatchError(ETagError):
    """Exception raised when the resource version does not match."""

    error_code = ErrorCode.VERSION_MISMATCH
    status_code = status.HTTP_412_PRECONDITION_FAILED

    def __init__(self, resource_id: object, version: int) -> None:
        """Initialize with the resource ID and version."""
        super().__init__(version, f"Resource {resource_id} has version {version}")


class VersionMissingError(AppError):
    """Exception raised when the version is missing in the request."""

    error_code = ErrorCode.VERSION_MISSING
    status_code = status.HTTP_428_PRECONDITION_REQUIRED

    def __init__(self, resource_id: object) -> None:
        """Initialize with the resource ID."""
        super().__init__(
            f"If-Match header required for updating resource {resource_id}"
        )
