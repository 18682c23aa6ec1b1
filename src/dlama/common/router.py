"""Common router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from dlama.config import settings
from dlama.config.db import get_session

__all__ = ["router"]


router = APIRouter(tags=["Common", "Health"])


@router.get("/", include_in_schema=False, summary="Root endpoint")
async def root() -> dict[str, str]:
    """Name and version of the running service."""
    return {"service": "dlama", "version": settings.version}


@router.get("/health", include_in_schema=False, summary="Health check endpoint")
async def health(db: Annotated[AsyncSession, Depends(get_session)]) -> Response:
    """Report whether the database and the project storage root are usable.

    Returns:
        204 if both are reachable, 503 otherwise.
    """
    try:
        await db.scalar(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check failed: database unreachable")
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    if not settings.project_storage_dir.is_dir():
        logger.error(
            "Health check failed: storage missing", path=settings.project_storage_dir
        )
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
