"""Project repository."""

from uuid import UUID

from loguru import logger
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.datapoint.models import ImageDataPoint, TextDataPoint

from .exceptions import ProjectNotFoundError
from .models import Project

__all__ = ["delete_project_db", "get_project_db", "save_project_db"]


async def get_project_db(db: AsyncSession, project_id: UUID) -> Project:
    """Retrieve a project by its ID.

    Args:
        db: Database session instance.
        project_id: The UUID of the project to retrieve.

    Returns:
        Project: The project object corresponding to the given ID.

    Raises:
        ProjectNotFoundError: If the project is not found.
    """
    result = await db.exec(select(Project).where(Project.id == project_id))
    project = result.first()

    if project is None:
        raise ProjectNotFoundError(project_id)

    return project


async def save_project_db(db: AsyncSession, project: Project) -> Project:
    """Save a new project to the database.

    Args:
        db: Database session instance.
        project: The project object to save.

    Returns:
        The saved project.
    """
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.debug("Project saved to DB", project_id=project.id)
    return project


async def delete_project_db(db: AsyncSession, project_id: UUID) -> Project:
    """Delete a project together with all of its data points.

    Args:
        db: Database session instance.
        project_id: The UUID of the project to delete.

    Returns:
        The deleted project.

    Raises:
        ProjectNotFoundError: If the project is not found.
    """
    project = await get_project_db(db, project_id)

    for model in (TextDataPoint, ImageDataPoint):
        data_points = (
            await db.exec(select(model).where(model.project_id == project_id))
        ).all()
        for data_point in data_points:
            await db.delete(data_point)

    await db.delete(project)
    await db.commit()
    logger.debug("Project deleted", project_id=project_id)
    return project
