"""Parse image uploads: a single image or a ZIP archive of images."""

import io
import shutil
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Final

from loguru import logger

from dlama.config import settings
from dlama.config.errors import ErrorNames

from ..exceptions import MalformedInputError, StorageError, TooManyFilesError
from ..file_format import FileFormat
from ..schemas import UploadedFile
from ..staging import ImageStaging
from .base import ensure_not_empty

__all__ = ["IMAGE_EXTENSIONS", "image_file_name", "parse_images"]


IMAGE_EXTENSIONS: Final[frozenset[str]] = frozenset({
    FileFormat.JPG,
    FileFormat.JPEG,
    FileFormat.PNG,
})

_ZIP_READ_ERRORS: Final = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    NotImplementedError,
    RuntimeError,
)


def image_file_name(index: int, extension: str) -> str:
    """Return the storage name of the image with ``index``."""
    return f"image_{index}{extension.lower()}"


def parse_images(
    file: UploadedFile, start_index: int, staging: ImageStaging | None
) -> list[Path]:
    """Stage the images of an upload under their final names.

    A single ``.jpg``, ``.jpeg`` or ``.png`` upload is staged as
    ``image_{start_index}{ext}``. For a ``.zip`` upload, image entries are
    staged in archive order with indices counting up from ``start_index``;
    directories and non-image entries are ignored.

    Args:
        file: The uploaded file.
        start_index: Index of the first image.
        staging: Open staging area of the current ingestion call.

    Returns:
        Paths the images will have in project storage, in index order.

    Raises:
        MalformedInputError: If the archive cannot be read.
        TooManyFilesError: If the archive holds more than ``max_zip_members``
            images.
        EmptyDatasetError: If the archive holds no image.
        StorageError: If a staged file cannot be written.
    """
    if staging is None:
        raise StorageError("Image ingestion requires a staging area")

    if file.extension == FileFormat.ZIP:
        paths = _stage_archive(file, start_index, staging)
    else:
        paths = [_stage_single(file, start_index, staging)]

    logger.debug("Images staged", file_name=file.file_name, count=len(paths))
    return ensure_not_empty(paths, file.file_name)


def _stage_single(file: UploadedFile, index: int, staging: ImageStaging) -> Path:
    staged, final = staging.add(image_file_name(index, file.extension))
    try:
        staged.write_bytes(file.content)
    except OSError as e:
        raise StorageError(f"Could not stage {final.name}") from e
    return final


def _stage_archive(
    file: UploadedFile, start_index: int, staging: ImageStaging
) -> list[Path]:
    try:
        archive = zipfile.ZipFile(io.BytesIO(file.content))
    except zipfile.BadZipFile as e:
        raise MalformedInputError(ErrorNames.INVALID_ZIP_ERROR) from e

    with archive:
        entries = _image_entries(archive)
        if len(entries) > settings.max_zip_members:
            raise TooManyFilesError(len(entries))

        paths: list[Path] = []
        for index, entry in enumerate(entries, start=start_index):
            suffix = PurePosixPath(entry.filename).suffix
            staged, final = staging.add(image_file_name(index, suffix))
            _extract_entry(archive, entry, staged)
            paths.append(final)
    return paths


def _image_entries(archive: zipfile.ZipFile) -> list[zipfile.ZipInfo]:
    entries = []
    for info in archive.infolist():
        if info.is_dir():
            continue
        if PurePosixPath(info.filename).suffix.lower() not in IMAGE_EXTENSIONS:
            logger.debug("Skipping non-image archive entry", entry=info.filename)
            continue
        entries.append(info)
    return entries


def _extract_entry(
    archive: zipfile.ZipFile, entry: zipfile.ZipInfo, staged: Path
) -> None:
    try:
        with archive.open(entry) as source, Path.open(staged, "wb") as target:
            shutil.copyfileobj(source, target)
    except _ZIP_READ_ERRORS as e:
        raise MalformedInputError(
            f"Archive entry '{entry.filename}' could not be extracted"
        ) from e
    except OSError as e:
        raise StorageError(f"Could not stage {staged.name}") from e
