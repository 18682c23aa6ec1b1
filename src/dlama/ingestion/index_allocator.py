"""Allocate data point indices within a project."""

import asyncio
from uuid import UUID
from weakref import WeakValueDictionary

from loguru import logger
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.datapoint.repository import get_max_index_db
from dlama.project.data_type import ProjectDataType

__all__ = ["next_index", "project_lock"]


_project_locks: WeakValueDictionary[UUID, asyncio.Lock] = WeakValueDictionary()


def project_lock(project_id: UUID) -> asyncio.Lock:
    """Return the lock serializing ingestion into one project.

    Holding it around allocate-then-commit keeps two uploads to the same
    project from reading the same maximum index or interleaving file writes.
    """
    lock = _project_locks.get(project_id)
    if lock is None:
        lock = asyncio.Lock()
        _project_locks[project_id] = lock
    return lock


async def next_index(
    db: AsyncSession, project_id: UUID, data_type: ProjectDataType
) -> int:
    """Return the first free index of a project: current maximum plus one.

    Text and image indices are separate sequences. Call once per batch and
    count up locally; callers must hold ``project_lock(project_id)``.
    """
    max_index = await get_max_index_db(db, project_id, data_type)
    start = 0 if max_index is None else max_index + 1

    logger.debug("Index allocated", project_id=project_id, start=start)
    return start
