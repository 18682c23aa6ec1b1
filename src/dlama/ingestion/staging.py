"""Stage extracted images before moving them into a project directory."""

import shutil
import tempfile
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Self

from loguru import logger

from dlama.config import settings

from .exceptions import StorageError
from .storage import ensure_project_directory, safe_join, target_path

if TYPE_CHECKING:
    from dlama.project.models import Project

__all__ = ["ImageStaging"]


class ImageStaging:
    """Per-call staging area with all-or-nothing promotion.

    Files are written into a private temporary directory under their final
    names. ``promote`` moves them into the project directory and remembers
    every moved file. Leaving the context with an exception (cancellation
    included) deletes the promoted files unless the batch was already
    committed. The staging directory is removed in every case.
    """

    def __init__(self, project: "Project", staging_root: Path | None = None) -> None:
        self._project = project
        self._project_id = project.id
        self._staging_root = staging_root or settings.staging_dir
        self._directory: Path | None = None
        self._pending: list[tuple[Path, Path]] = []
        self._promoted: list[Path] = []
        self._committed = False

    async def __aenter__(self) -> Self:
        try:
            ensure_project_directory(self._project)
            self._staging_root.mkdir(parents=True, exist_ok=True)
            self._directory = Path(tempfile.mkdtemp(dir=self._staging_root))
        except OSError as e:
            raise StorageError("Could not create a staging directory") from e

        logger.debug("Staging directory created", path=self._directory)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None and not self._committed:
            self.rollback()
        self._discard()

    @property
    def promoted(self) -> list[Path]:
        """Files moved into the project directory by this call."""
        return list(self._promoted)

    def add(self, name: str) -> tuple[Path, Path]:
        """Reserve ``name`` and return its staging path and final path.

        Raises:
            StorageError: If the name is invalid or was already reserved.
        """
        if self._directory is None:
            raise StorageError("Staging area is not open")

        staged = safe_join(self._directory, name)
        final = target_path(self._project, name)
        if any(existing == staged for existing, _ in self._pending):
            raise StorageError(f"File {name} was staged twice")

        self._pending.append((staged, final))
        return staged, final

    def promote(self) -> list[Path]:
        """Move every staged file into the project directory.

        Raises:
            StorageError: If a target already exists or a move fails. Files
                promoted before the failure stay recorded for ``rollback``.
        """
        for staged, final in self._pending:
            if final.exists():
                raise StorageError(f"Path collision in project storage: {final.name}")
            try:
                shutil.move(staged, final)
            except OSError as e:
                raise StorageError(f"Could not move {final.name} into storage") from e
            self._promoted.append(final)

        logger.debug(
            "Staged files promoted",
            project_id=self._project_id,
            count=len(self._promoted),
        )
        self._pending.clear()
        return self.promoted

    def mark_committed(self) -> None:
        """Keep the promoted files, since rows referring to them are committed."""
        self._committed = True

    def rollback(self) -> None:
        """Delete every file promoted during this call."""
        for path in self._promoted:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.exception("Could not roll back stored file", path=path)

        if self._promoted:
            logger.info(
                "Promoted files rolled back",
                project_id=self._project_id,
                count=len(self._promoted),
            )
        self._promoted.clear()

    def _discard(self) -> None:
        if self._directory is not None:
            shutil.rmtree(self._directory, ignore_errors=True)
            logger.debug("Staging directory removed", path=self._directory)
            self._directory = None
        self._pending.clear()
