"""Ingestion exceptions."""

from fastapi import status

from dlama.common.app_error import AppError
from dlama.config import settings
from dlama.config.errors import ErrorCode

__all__ = [
    "EmptyDatasetError",
    "FileTooLargeError",
    "MalformedInputError",
    "PersistenceError",
    "StorageError",
    "TooManyFilesError",
    "UnsupportedFormatError",
]


class UnsupportedFormatError(AppError):
    """Exception raised when the file extension is not accepted."""

    error_code = ErrorCode.UNSUPPORTED_FORMAT
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, extension: str, allowed: frozenset[str] | None = None) -> None:
        """Initialize with the rejected extension and the accepted ones."""
        allowed = settings.allowed_extensions if allowed is None else allowed
        shown = extension or "<none>"
        super().__init__(
            f"Format '{shown}' is not supported. Supported formats: "
            f"{', '.join(sorted(allowed))}"
        )


class EmptyDatasetError(AppError):
    """Exception raised when a file yields no usable records."""

    error_code = ErrorCode.EMPTY_DATASET
    message = "The file could not be read or is empty"
    status_code = status.HTTP_400_BAD_REQUEST


class MalformedInputError(AppError):
    """Exception raised when the bytes do not parse as their declared format."""

    error_code = ErrorCode.MALFORMED_INPUT
    message = "The file content does not match its format"
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class FileTooLargeError(AppError):
    """Exception raised when the upload exceeds the size limit."""

    error_code = ErrorCode.FILE_TOO_LARGE
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE

    def __init__(self, size: int) -> None:
        """Initialize with the size read so far."""
        super().__init__(
            f"File is too large: more than {size} bytes. "
            f"Max: {settings.max_upload_size} bytes"
        )


class TooManyFilesError(AppError):
    """Exception raised when an archive holds too many images."""

    error_code = ErrorCode.INVALID_FILE
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, count: int) -> None:
        """Initialize with the number of image entries found."""
        super().__init__(
            f"Archive contains {count} images. Max: {settings.max_zip_members}"
        )


class StorageError(AppError):
    """Exception raised when staging or moving files fails."""

    error_code = ErrorCode.STORAGE_ERROR
    message = "Could not store the uploaded files"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PersistenceError(AppError):
    """Exception raised when the data point batch cannot be committed."""

    error_code = ErrorCode.PERSISTENCE_ERROR
    message = "Could not save the data points"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
