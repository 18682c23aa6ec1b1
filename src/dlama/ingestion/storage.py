"""Project storage directories for image data points."""

import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from .exceptions import StorageError

if TYPE_CHECKING:
    from dlama.project.models import Project

__all__ = [
    "delete_project_directory",
    "ensure_project_directory",
    "project_directory",
    "safe_join",
    "target_path",
]


def project_directory(project: "Project") -> Path:
    """Return the storage directory owned by an image project.

    Raises:
        StorageError: If the project has no storage location.
    """
    if not project.storage_path:
        raise StorageError(f"Project {project.id} has no storage location")
    return Path(project.storage_path)


def ensure_project_directory(project: "Project") -> Path:
    """Create the project's storage directory if it does not exist yet."""
    directory = project_directory(project)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Could not create storage for project {project.id}") from e

    logger.debug("Project directory ready", project_id=project.id, path=directory)
    return directory


def target_path(project: "Project", proposed_name: str) -> Path:
    """Return the path of ``proposed_name`` inside the project's directory."""
    return safe_join(project_directory(project), proposed_name)


def safe_join(root: Path, name: str) -> Path:
    """Join a plain file name onto ``root`` without leaving it.

    Raises:
        StorageError: If the name is empty, contains a path separator or a
            parent reference, or resolves outside ``root``.
    """
    if not name or name in {".", ".."} or "/" in name or "\\" in name or "\0" in name:
        raise StorageError(f"Invalid file name: {name!r}")

    candidate = root / name
    if candidate.resolve().parent != root.resolve():
        raise StorageError(f"Invalid file name: {name!r}")
    return candidate


def delete_project_directory(project: "Project") -> None:
    """Remove the project's storage directory recursively, if present."""
    if not project.storage_path:
        return

    directory = Path(project.storage_path)
    if not directory.exists():
        logger.debug("Project directory already absent", project_id=project.id)
        return

    try:
        shutil.rmtree(directory)
    except OSError as e:
        raise StorageError(f"Could not delete storage for project {project.id}") from e
    logger.debug("Project directory deleted", project_id=project.id, path=directory)
