"""Common module for shared error types and routes.

Key Components:
- App errors: Application-specific error types with structured error codes
- ETag errors: Optimistic locking failures that carry the current version
- Health router: Liveness endpoints
"""

from .app_error import AppError, ETagError
from .exceptions import (
    InvalidFileError,
    NotFoundError,
    VersionMismatchError,
    VersionMissingError,
)

__all__ = [
    "AppError",
    "ETagError",
    "InvalidFileError",
    "NotFoundError",
    "VersionMismatchError",
    "VersionMissingError",
]
