"""Data point exceptions."""

from uuid import UUID

from fastapi import status

from dlama.common.app_error import AppError
from dlama.common.exceptions import NotFoundError
from dlama.config.errors import ErrorCode

__all__ = ["DataPointNotFoundError", "WrongDataTypeError"]


class DataPointNotFoundError(NotFoundError):
    """Exception raised when the data point is not found."""

    def __init__(self, project_id: UUID, index: int) -> None:
        """Initialize with the project ID and data point index."""
        super().__init__(f"Data point {index} not found in project {project_id}")


class WrongDataTypeError(AppError):
    """Exception raised when an operation does not fit the project's data type."""

    error_code = ErrorCode.WRONG_DATA_TYPE
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, expected: str) -> None:
        """Initialize with the data type the operation requires."""
        super().__init__(
            f"The project data type must be {expected} for this request"
        )
