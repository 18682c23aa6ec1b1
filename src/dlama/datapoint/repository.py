"""Data point repository."""

from collections.abc import Sequence
from typing import cast
from uuid import UUID

from loguru import logger
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.common.exceptions import VersionMismatchError
from dlama.project.data_type import ProjectDataType

from .exceptions import DataPointNotFoundError
from .models import DataPoint, DataPointUpdate, ImageDataPoint, TextDataPoint

__all__ = [
    "add_data_points_db",
    "delete_data_points_db",
    "get_data_point_db",
    "get_data_points_db",
    "get_max_index_db",
    "model_for",
    "update_text_data_point_db",
]


def model_for(
    data_type: ProjectDataType,
) -> type[TextDataPoint] | type[ImageDataPoint]:
    """Return the table model storing data points of ``data_type``."""
    return TextDataPoint if data_type == ProjectDataType.TEXT else ImageDataPoint


async def get_max_index_db(
    db: AsyncSession, project_id: UUID, data_type: ProjectDataType
) -> int | None:
    """Return the highest data point index of a project, or None if empty.

    Args:
        db: Database session instance.
        project_id: The UUID of the project.
        data_type: Kind of data points to look at.

    Returns:
        The maximum ``data_point_index`` or None.
    """
    model = model_for(data_type)
    stmt = select(func.max(model.data_point_index)).where(
        model.project_id == project_id
    )
    max_index: int | None = await db.scalar(stmt)

    logger.debug("Max data point index read", project_id=project_id, max=max_index)
    return max_index


async def add_data_points_db(
    db: AsyncSession, data_points: Sequence[DataPoint]
) -> None:
    """Stage a batch of data points in the session and flush it.

    The caller owns the transaction and commits or rolls it back.

    Args:
        db: Database session instance.
        data_points: The data points to insert.
    """
    db.add_all(data_points)
    await db.flush()
    logger.debug("Data points flushed", count=len(data_points))


async def get_data_points_db(
    db: AsyncSession,
    project_id: UUID,
    data_type: ProjectDataType,
    start: int | None = None,
    end: int | None = None,
) -> Sequence[DataPoint]:
    """Retrieve the data points of a project ordered by index.

    Args:
        db: Database session instance.
        project_id: The UUID of the project.
        data_type: Kind of data points to read.
        start: Optional inclusive lower index bound.
        end: Optional inclusive upper index bound.

    Returns:
        The matching data points.
    """
    model = model_for(data_type)
    stmt = select(model).where(model.project_id == project_id)
    if start is not None:
        stmt = stmt.where(model.data_point_index >= start)
    if end is not None:
        stmt = stmt.where(model.data_point_index <= end)
    stmt = stmt.order_by(model.data_point_index)

    data_points = (await db.exec(stmt)).all()
    logger.debug(
        "Data points retrieved", project_id=project_id, items=len(data_points)
    )
    return data_points


async def get_data_point_db(
    db: AsyncSession, project_id: UUID, data_type: ProjectDataType, index: int
) -> DataPoint:
    """Retrieve a single data point by its index.

    Raises:
        DataPointNotFoundError: If no data point has this index.
    """
    model = model_for(data_type)
    stmt = select(model).where(
        (model.project_id == project_id) & (model.data_point_index == index)
    )
    data_point = (await db.exec(stmt)).first()

    if data_point is None:
        raise DataPointNotFoundError(project_id, index)
    return data_point


async def update_text_data_point_db(
    db: AsyncSession,
    project_id: UUID,
    index: int,
    update_data: DataPointUpdate,
    expected_version: int,
) -> TextDataPoint:
    """Update a text data point using optimistic locking.

    Args:
        db: Database session instance.
        project_id: The UUID of the project.
        index: Index of the data point to update.
        update_data: The fields to update.
        expected_version: The version expected by the client.

    Returns:
        The updated data point.

    Raises:
        DataPointNotFoundError: If the data point is not found.
        VersionMismatchError: If the version does not match (lost update).
    """
    data_point = cast(
        TextDataPoint,
        await get_data_point_db(db, project_id, ProjectDataType.TEXT, index),
    )

    if data_point.version != expected_version:
        raise VersionMismatchError(f"{project_id}/{index}", data_point.version)

    for field, value in update_data.model_dump(exclude_unset=True).items():
        setattr(data_point, field, value)

    data_point.version += 1

    await db.commit()
    await db.refresh(data_point)

    logger.debug("Text data point updated", project_id=project_id, index=index)
    return data_point


async def delete_data_points_db(
    db: AsyncSession,
    project_id: UUID,
    data_type: ProjectDataType,
    start: int | None = None,
    end: int | None = None,
) -> list[str]:
    """Delete the data points of a project within an inclusive index range.

    The deletion is flushed but not committed, so the caller can remove the
    image files first.

    Args:
        db: Database session instance.
        project_id: The UUID of the project.
        data_type: Kind of data points to delete.
        start: Optional inclusive lower index bound.
        end: Optional inclusive upper index bound.

    Returns:
        Storage paths of the deleted image data points (empty for text).
    """
    data_points = await get_data_points_db(db, project_id, data_type, start, end)
    paths = [dp.path for dp in data_points if isinstance(dp, ImageDataPoint)]

    for data_point in data_points:
        await db.delete(data_point)
    await db.flush()

    logger.debug("Data points deleted", project_id=project_id, count=len(data_points))
    return paths
