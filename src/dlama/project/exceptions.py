"""Project exceptions."""

from uuid import UUID

from dlama.common.exceptions import NotFoundError

__all__ = ["ProjectNotFoundError"]


class ProjectNotFoundError(NotFoundError):
    """Exception raised when the project is not found."""

    def __init__(self, project_id: UUID | str) -> None:
        """Initialize with the project ID."""
        super().__init__(f"Project with ID {project_id} not found")
