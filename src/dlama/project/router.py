"""Project router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status
from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.config.db import get_session

from .models import ProjectCreate, ProjectPublic
from .service import create_project_svc, delete_project_svc, get_project_svc

__all__ = ["router"]


router = APIRouter(tags=["Project"])


@router.post("", summary="Create a project")
async def create_project(
    project: ProjectCreate,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Create a text or image project.

    Args:
        project: Name, description and data type of the project
        request: The HTTP request object
        db: Database session for persistence operations

    Returns:
        Response with status code 201 Created and the project ID in the Location header.
    """
    project_id = await create_project_svc(db, project)
    logger.debug("Project created", project_id=project_id)

    return Response(
        status_code=status.HTTP_201_CREATED,
        headers={"Location": f"{request.url}/{project_id}"},
    )


@router.get("/{project_id}", summary="Get project by ID")
async def get_project(
    project_id: UUID, db: Annotated[AsyncSession, Depends(get_session)]
) -> ProjectPublic:
    """Retrieve a single project by its ID.

    Raises:
        ProjectNotFoundError: If the project with the specified ID doesn't exist
    """
    return await get_project_svc(db, project_id)


@router.delete("/{project_id}", summary="Delete project by ID")
async def delete_project(
    project_id: UUID, db: Annotated[AsyncSession, Depends(get_session)]
) -> Response:
    """Delete a project with its data points and stored images.

    Returns:
        Response with status code 204 No Content.
    """
    await delete_project_svc(db, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
