"""Main application module for the D-LAMA service."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Final

from aiofiles.os import makedirs
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from prometheus_fastapi_instrumentator import Instrumentator
from sqlmodel import SQLModel

from dlama.config import config_logger, engine, settings
from dlama.utils.error_handler import register_exception_handlers
from dlama.utils.routers import register_routers

config_logger()


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
    """Initialize resources on startup."""
    await makedirs(settings.project_storage_dir, exist_ok=True)
    await makedirs(settings.staging_dir, exist_ok=True)

    async with engine.begin() as conn:
        if settings.clear_db_on_restart:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    logger.info(
        "D-LAMA started",
        environment=settings.app_env,
        version=settings.version,
        storage=settings.project_storage_dir,
    )

    yield
    await engine.dispose()


app: Final = FastAPI(
    title="D-LAMA",
    description="Dataset ingestion and indexing for data labeling projects",
    version=settings.version,
    lifespan=lifespan,
)


# --------------------------------------------------------
# P R O M E T H E U S
# --------------------------------------------------------
Instrumentator().instrument(app).expose(app, include_in_schema=False)


# --------------------------------------------------------
# C O R S
# --------------------------------------------------------
if settings.app_env != "production":
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origin,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag", "Location"],
    )


# --------------------------------------------------------
# R O U T E R S
# --------------------------------------------------------
register_routers(app)


# --------------------------------------------------------
# E X C E P T I O N S
# --------------------------------------------------------
register_exception_handlers(app)
