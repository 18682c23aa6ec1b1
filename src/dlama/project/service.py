"""Project service."""

from uuid import UUID, uuid4

from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.config import settings
from dlama.ingestion.storage import (
    delete_project_directory,
    ensure_project_directory,
)

from .data_type import ProjectDataType
from .models import Project, ProjectCreate, ProjectPublic
from .repository import delete_project_db, get_project_db, save_project_db

__all__ = ["create_project_svc", "delete_project_svc", "get_project_svc"]


async def create_project_svc(db: AsyncSession, project_create: ProjectCreate) -> UUID:
    """Create a project and, for image projects, its storage directory.

    Args:
        db: Database session for persistence operations.
        project_create: Name, description and data type of the project.

    Returns:
        UUID of the created project.
    """
    project = Project.model_validate(project_create, update={"id": uuid4()})

    if project.data_type == ProjectDataType.IMAGE:
        project.storage_path = str(
            settings.project_storage_dir / f"project_{project.id}"
        )
        ensure_project_directory(project)

    try:
        await save_project_db(db, project)
    except Exception:
        # Roll back the directory on DB failure
        delete_project_directory(project)
        raise

    logger.debug("Project created", project_id=project.id, data_type=project.data_type)
    return project.id


async def get_project_svc(db: AsyncSession, project_id: UUID) -> ProjectPublic:
    """Read a single project from the database."""
    project = await get_project_db(db, project_id)
    return ProjectPublic.model_validate(project)


async def delete_project_svc(db: AsyncSession, project_id: UUID) -> None:
    """Delete a project, its data points, and its storage directory.

    Args:
        db: Database session for persistence operations.
        project_id: The UUID of the project to delete.
    """
    project = await delete_project_db(db, project_id)
    delete_project_directory(project)
    logger.debug("Project storage released", project_id=project_id)
