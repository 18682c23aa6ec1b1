"""Read a multipart upload into an in-memory dataset file."""

from fastapi import UploadFile

from dlama.common.exceptions import InvalidFileError
from dlama.config import settings
from dlama.config.errors import ErrorNames

from ..exceptions import FileTooLargeError
from ..schemas import UploadedFile

__all__ = ["read_upload"]

_CHUNK_SIZE = 1024 * 1024


async def read_upload(file: UploadFile | None) -> UploadedFile:
    """Stream an upload into memory while enforcing the size limit.

    Args:
        file: The uploaded file provided by the client.

    Returns:
        The upload as an immutable ``UploadedFile``.

    Raises:
        InvalidFileError: If no file or no filename was provided.
        FileTooLargeError: If the upload exceeds ``max_upload_size``.
    """
    if file is None:
        raise InvalidFileError(ErrorNames.FILE_MISSING_ERROR)
    if not file.filename:
        raise InvalidFileError(ErrorNames.FILENAME_MISSING_ERROR)

    chunks: list[bytes] = []
    size = 0
    while chunk := await file.read(_CHUNK_SIZE):
        size += len(chunk)
        if size > settings.max_upload_size:
            raise FileTooLargeError(size)
        chunks.append(chunk)

    return UploadedFile(
        file_name=file.filename,
        content=b"".join(chunks),
        content_type=file.content_type,
    )
