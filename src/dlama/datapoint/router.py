"""Data point router."""

from typing import Annotated
from uuid import UUID

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Query,
    Request,
    Response,
    UploadFile,
    status,
)
from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.config.db import get_session
from dlama.ingestion import IngestionResult

from .models import DataPointUpdate, ImageDataPointPublic, TextDataPointPublic
from .service import (
    ImageContent,
    delete_data_points_svc,
    get_data_point_svc,
    get_data_points_svc,
    update_text_data_point_svc,
    upload_data_points_svc,
)

__all__ = ["router"]


router = APIRouter(tags=["Data Point"])


@router.post(
    "", status_code=status.HTTP_201_CREATED, summary="Upload a dataset file"
)
async def upload_data_points(
    project_id: UUID,
    file: Annotated[UploadFile, File(description="Text, CSV, JSON, image or ZIP")],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> IngestionResult:
    """Ingest a dataset file into the project.

    Text projects accept ``.txt``, ``.csv`` and ``.json`` files; image projects
    accept single ``.jpg``, ``.jpeg`` or ``.png`` files and ``.zip`` archives.
    All data points of the file are committed together or not at all.

    Args:
        project_id: The UUID of the target project
        file: The dataset file to ingest
        db: Database session for persistence operations

    Returns:
        Number of created data points and their index range.
    """
    result = await upload_data_points_svc(db, project_id, file)
    logger.debug("Data points uploaded", project_id=project_id, **result.model_dump())
    return result


@router.get("", summary="List data points")
async def get_data_points(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    start: Annotated[int | None, Query(ge=0)] = None,
    end: Annotated[int | None, Query(ge=0)] = None,
) -> list[TextDataPointPublic] | list[ImageDataPointPublic]:
    """Retrieve the data points of a project ordered by index.

    Args:
        project_id: The UUID of the project
        db: Database session for persistence operations
        start: Optional inclusive lower index bound
        end: Optional inclusive upper index bound
    """
    data_points = await get_data_points_svc(db, project_id, start, end)
    logger.debug("Data points retrieved", project_id=project_id, items=len(data_points))
    return list(data_points)  # type: ignore[arg-type]


@router.get(
    "/{index}",
    summary="Get data point by index",
    response_model=TextDataPointPublic,
    responses={status.HTTP_200_OK: {"content": {"image/jpeg": {}, "image/png": {}}}},
)
async def get_data_point(
    project_id: UUID,
    index: int,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_session)],
) -> TextDataPointPublic | Response:
    """Retrieve a single data point with its version in the ETag header.

    Text data points are returned as JSON, image data points as the stored
    image file.

    Raises:
        DataPointNotFoundError: If no data point has this index
    """
    data_point, version = await get_data_point_svc(db, project_id, index)
    etag = f'"{version}"'

    if isinstance(data_point, ImageContent):
        return Response(
            content=data_point.content,
            media_type=data_point.media_type,
            headers={"ETag": etag},
        )

    response.headers["ETag"] = etag
    return data_point


@router.patch("/{index}", summary="Update text data point")
async def update_data_point(
    project_id: UUID,
    index: int,
    request: Request,
    update: Annotated[DataPointUpdate, Body()],
    db: Annotated[AsyncSession, Depends(get_session)],
) -> Response:
    """Update a text data point with version control using ETags.

    Requires an If-Match header with the current version to prevent
    concurrent modification issues.

    Returns:
        204 No Content response with the new ETag

    Raises:
        VersionMismatchError: If the ETag doesn't match current version
        VersionMissingError: If the If-Match header is missing
        WrongDataTypeError: If the project is an image project
    """
    new_version = await update_text_data_point_svc(
        db, request, project_id, index, update
    )
    logger.debug("Data point updated", project_id=project_id, index=index)

    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"Location": f"{request.url.path}", "ETag": f'"{new_version}"'},
    )


@router.delete("", summary="Delete data points by index range")
async def delete_data_points(
    project_id: UUID,
    db: Annotated[AsyncSession, Depends(get_session)],
    start: Annotated[int | None, Query(ge=0)] = None,
    end: Annotated[int | None, Query(ge=0)] = None,
) -> Response:
    """Delete data points within an inclusive index range.

    Without bounds every data point of the project is deleted. Image files
    of deleted data points are removed from project storage.
    """
    await delete_data_points_svc(db, project_id, start, end)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
