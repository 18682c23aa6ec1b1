"""Data point service."""

import asyncio
import shutil
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import NamedTuple, cast
from uuid import UUID

from fastapi import Request, UploadFile
from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.config import settings
from dlama.ingestion import IngestionResult, ingest_dataset, read_upload
from dlama.ingestion.exceptions import StorageError
from dlama.project.data_type import ProjectDataType
from dlama.project.repository import get_project_db
from dlama.utils.etag_parser import parse_etag

from .exceptions import WrongDataTypeError
from .models import (
    DataPointUpdate,
    ImageDataPoint,
    ImageDataPointPublic,
    TextDataPoint,
    TextDataPointPublic,
)
from .repository import (
    delete_data_points_db,
    get_data_point_db,
    get_data_points_db,
    update_text_data_point_db,
)

__all__ = [
    "ImageContent",
    "delete_data_points_svc",
    "get_data_point_svc",
    "get_data_points_svc",
    "update_text_data_point_svc",
    "upload_data_points_svc",
]


_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


class ImageContent(NamedTuple):
    """Stored file of an image data point."""

    content: bytes
    media_type: str


async def upload_data_points_svc(
    db: AsyncSession, project_id: UUID, file: UploadFile | None
) -> IngestionResult:
    """Ingest an uploaded dataset into a project.

    Args:
        db: Database session for persistence operations.
        project_id: The UUID of the target project.
        file: The uploaded dataset file.

    Returns:
        Number of created data points and their index range.

    Raises:
        ProjectNotFoundError: If the project does not exist.
    """
    project = await get_project_db(db, project_id)
    uploaded = await read_upload(file)
    result = await ingest_dataset(db, project, uploaded)

    logger.info(
        "Dataset ingested",
        project_id=project_id,
        file_name=uploaded.file_name,
        created=result.created,
    )
    return result


async def get_data_points_svc(
    db: AsyncSession,
    project_id: UUID,
    start: int | None = None,
    end: int | None = None,
) -> Sequence[TextDataPointPublic] | Sequence[ImageDataPointPublic]:
    """Read the data points of a project within an optional index range."""
    project = await get_project_db(db, project_id)
    data_points = await get_data_points_db(
        db, project_id, project.data_type, start, end
    )

    if project.data_type == ProjectDataType.IMAGE:
        return [
            ImageDataPointPublic.from_model(cast(ImageDataPoint, dp))
            for dp in data_points
        ]
    return [TextDataPointPublic.model_validate(dp) for dp in data_points]


async def get_data_point_svc(
    db: AsyncSession, project_id: UUID, index: int
) -> tuple[TextDataPointPublic | ImageContent, int]:
    """Read a single data point together with its version.

    Text data points are returned as their public model, image data points as
    the bytes of their stored file.

    Raises:
        DataPointNotFoundError: If no data point has this index.
        StorageError: If the image file cannot be read.
    """
    project = await get_project_db(db, project_id)
    data_point = await get_data_point_db(db, project_id, project.data_type, index)

    if isinstance(data_point, ImageDataPoint):
        return _read_image(data_point), data_point.version
    return TextDataPointPublic.model_validate(data_point), data_point.version


def _read_image(data_point: ImageDataPoint) -> ImageContent:
    path = Path(data_point.path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise StorageError(
            f"Image of data point {data_point.data_point_index} is not readable"
        ) from e

    media_type = _MEDIA_TYPES.get(path.suffix.lower(), "application/octet-stream")
    return ImageContent(content=content, media_type=media_type)


async def update_text_data_point_svc(
    db: AsyncSession,
    request: Request,
    project_id: UUID,
    index: int,
    update: DataPointUpdate,
) -> int:
    """Update the content of a text data point.

    Args:
        db: Database session for persistence operations.
        request: The HTTP request carrying the If-Match header.
        project_id: The UUID of the project.
        index: Index of the data point to update.
        update: The new content.

    Returns:
        The new version of the data point.

    Raises:
        WrongDataTypeError: If the project is an image project.
        VersionMissingError: If the If-Match header is missing.
        VersionMismatchError: If the ETag does not match the current version.
    """
    project = await get_project_db(db, project_id)
    if project.data_type != ProjectDataType.TEXT:
        raise WrongDataTypeError(ProjectDataType.TEXT)

    expected_version = parse_etag(f"{project_id}/{index}", request)
    data_point: TextDataPoint = await update_text_data_point_db(
        db, project_id, index, update, expected_version
    )
    return data_point.version


async def delete_data_points_svc(
    db: AsyncSession,
    project_id: UUID,
    start: int | None = None,
    end: int | None = None,
) -> None:
    """Delete data points by index range and remove their image files.

    Image files are moved aside before the deletion is committed and moved
    back if anything fails, so rows and files are removed together. An image
    file that is already missing is logged and skipped.

    Raises:
        StorageError: If an image file cannot be moved out of storage.
    """
    project = await get_project_db(db, project_id)
    paths = [
        Path(path)
        for path in await delete_data_points_db(
            db, project_id, project.data_type, start, end
        )
    ]
    if not paths:
        await db.commit()
        return

    settings.staging_dir.mkdir(parents=True, exist_ok=True)
    trash = Path(tempfile.mkdtemp(dir=settings.staging_dir))
    moved: list[tuple[Path, Path]] = []
    try:
        for path in paths:
            try:
                moved.append((path, Path(shutil.move(path, trash / path.name))))
            except FileNotFoundError:
                logger.warning(
                    "Image file already missing", project_id=project_id, path=path
                )
            except OSError as e:
                raise StorageError(f"Could not delete image file {path.name}") from e
        await db.commit()
    except (Exception, asyncio.CancelledError):
        await db.rollback()
        _restore_files(moved)
        raise
    finally:
        shutil.rmtree(trash, ignore_errors=True)

    logger.debug("Data points removed", project_id=project_id, files=len(moved))


def _restore_files(moved: Sequence[tuple[Path, Path]]) -> None:
    for original, aside in moved:
        try:
            shutil.move(aside, original)
        except OSError:
            logger.exception("Could not restore image file", path=original)
