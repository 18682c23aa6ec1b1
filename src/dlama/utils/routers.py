"""Router Initializer."""

from fastapi import FastAPI

from dlama.common.router import router as common_router
from dlama.datapoint.router import router as datapoint_router
from dlama.project.router import router as project_router

__all__ = ["register_routers"]


def register_routers(app: FastAPI) -> None:
    """Register all API routers with the FastAPI application.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(common_router)
    app.include_router(project_router, prefix="/projects")
    app.include_router(datapoint_router, prefix="/projects/{project_id}/datapoints")
