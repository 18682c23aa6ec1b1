"""Turn one uploaded file into committed data points."""

import asyncio
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager, nullcontext
from datetime import UTC, datetime
from enum import StrEnum
from pathlib import Path
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.common.exceptions import InvalidFileError
from dlama.config import settings
from dlama.datapoint.models import DataPoint, ImageDataPoint, TextDataPoint
from dlama.datapoint.repository import add_data_points_db
from dlama.project.data_type import ProjectDataType
from dlama.project.models import Project

from .exceptions import EmptyDatasetError, PersistenceError
from .file_format import FormatKind
from .format_detector import detect_format
from .index_allocator import next_index, project_lock
from .parsers import RawRecord, get_parser
from .schemas import IngestionResult, UploadedFile
from .staging import ImageStaging

__all__ = ["IngestionState", "ingest_dataset"]


class IngestionState(StrEnum):
    """Steps of one ingestion call, logged as they are reached."""

    RECEIVED = "received"
    FORMAT_VALIDATED = "format_validated"
    PARSED = "parsed"
    INDEXES_ALLOCATED = "indexes_allocated"
    FILES_STAGED = "files_staged"
    PERSISTED = "persisted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


async def ingest_dataset(
    db: AsyncSession, project: Project, file: UploadedFile | None
) -> IngestionResult:
    """Parse an uploaded dataset and commit its data points to a project.

    The call is all-or-nothing: either every data point is committed together
    with its image file, or no row is persisted and no file written by this
    call remains in project storage. Calling it twice with the same file
    appends a second copy with shifted indices.

    Args:
        db: Database session; the batch is committed on it.
        project: Target project.
        file: The uploaded dataset.

    Returns:
        Number of created data points and their index range.

    Raises:
        InvalidFileError: If no file or file name was given.
        EmptyDatasetError: If the file is empty or yields no usable record.
        UnsupportedFormatError: If the extension is unknown or does not fit
            the project's data type.
        MalformedInputError: If the content does not parse as its format.
        TooManyFilesError: If an archive holds too many images.
        StorageError: If staging or moving image files fails.
        PersistenceError: If the batch cannot be saved.
    """
    if file is None or not file.file_name:
        raise InvalidFileError
    if file.size == 0:
        raise EmptyDatasetError(f"File '{file.file_name}' is empty")

    # A rollback expires the loaded project, so its attributes are read once here.
    project_id = project.id
    data_type = project.data_type
    _log_state(IngestionState.RECEIVED, project_id, file_name=file.file_name)

    file_format = detect_format(file.file_name, _allowed_extensions(data_type))
    parser = get_parser(file_format.kind)
    _log_state(IngestionState.FORMAT_VALIDATED, project_id, format=file_format.name)

    async with project_lock(project_id):
        try:
            start = await next_index(db, project_id, data_type)
            _log_state(IngestionState.INDEXES_ALLOCATED, project_id, start=start)

            async with _staging_for(project, file_format.kind) as staging:
                records = parser(file, start, staging)
                _log_state(IngestionState.PARSED, project_id, count=len(records))
                if staging is not None:
                    _log_state(IngestionState.FILES_STAGED, project_id)

                await _persist(db, _build_data_points(project_id, records, start))
                _log_state(IngestionState.PERSISTED, project_id)

                if staging is not None:
                    staging.promote()

                try:
                    await _commit(db)
                finally:
                    if staging is not None and not db.in_transaction():
                        staging.mark_committed()
        except (Exception, asyncio.CancelledError):
            if db.in_transaction():
                await db.rollback()
                _log_state(IngestionState.ROLLED_BACK, project_id)
            raise

    _log_state(IngestionState.COMMITTED, project_id, count=len(records))
    return IngestionResult(
        created=len(records), first_index=start, last_index=start + len(records) - 1
    )


def _allowed_extensions(data_type: ProjectDataType) -> frozenset[str]:
    if data_type == ProjectDataType.IMAGE:
        return settings.image_extensions
    return settings.text_extensions


def _staging_for(
    project: Project, kind: FormatKind
) -> AbstractAsyncContextManager[ImageStaging | None]:
    if kind == FormatKind.IMAGE:
        return ImageStaging(project)
    return nullcontext()


def _build_data_points(
    project_id: UUID, records: Sequence[RawRecord], start: int
) -> list[DataPoint]:
    now = datetime.now(tz=UTC)
    data_points: list[DataPoint] = []
    for index, record in enumerate(records, start=start):
        if isinstance(record, Path):
            data_points.append(
                ImageDataPoint(
                    project_id=project_id,
                    data_point_index=index,
                    path=str(record),
                    created_at=now,
                    updated_at=now,
                    version=1,
                )
            )
        else:
            data_points.append(
                TextDataPoint(
                    project_id=project_id,
                    data_point_index=index,
                    content=record,
                    created_at=now,
                    updated_at=now,
                    version=1,
                )
            )
    return data_points


async def _persist(db: AsyncSession, data_points: list[DataPoint]) -> None:
    try:
        await add_data_points_db(db, data_points)
    except SQLAlchemyError as e:
        raise PersistenceError(f"Could not save {len(data_points)} data points") from e


async def _commit(db: AsyncSession) -> None:
    """Commit the session, letting a started commit finish on cancellation.

    The driver keeps committing after the awaiting task is cancelled, so the
    cancellation is re-raised only once the outcome of the commit is known.
    """
    commit = asyncio.ensure_future(db.commit())
    try:
        await asyncio.shield(commit)
    except asyncio.CancelledError:
        await asyncio.wait([commit])
        if not commit.cancelled() and (error := commit.exception()) is not None:
            logger.warning("Commit failed after cancellation: {}", error)
        raise
    except SQLAlchemyError as e:
        raise PersistenceError("Could not commit the data points") from e


def _log_state(state: IngestionState, project_id: UUID, **extra: object) -> None:
    logger.debug("Ingestion {}", state, project_id=project_id, **extra)
