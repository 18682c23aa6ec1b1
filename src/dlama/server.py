"""ASGI server for the FastAPI application."""

import uvicorn
from uvicorn.config import LOGGING_CONFIG

from dlama.config import settings

__all__ = ["run"]


def run() -> None:
    """Run the FastAPI application using Uvicorn.

    Outside production uvicorn keeps its own log format; in production its
    records flow through the loguru intercept handler instead.
    """
    is_production = settings.app_env == "production"

    uvicorn.run(
        "dlama:app",
        host=settings.host_binding,
        port=settings.port,
        reload=settings.reload,
        reload_dirs=["src/dlama"],
        server_header=False,
        access_log=not is_production,
        log_config=None if is_production else LOGGING_CONFIG,
        log_level=None if is_production else settings.log_level.lower(),
    )
