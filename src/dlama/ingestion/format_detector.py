"""Detect the dataset format of an upload from its file name."""

from pathlib import PurePath

from loguru import logger

from .exceptions import UnsupportedFormatError
from .file_format import FileFormat

__all__ = ["detect_format"]


def detect_format(file_name: str, allowed: frozenset[str] | None = None) -> FileFormat:
    """Map a file name to its format using the extension only.

    The extension is matched case-insensitively and is authoritative; the
    content is never sniffed.

    Args:
        file_name: Name of the uploaded file, possibly including a client path.
        allowed: Optional subset of extensions to accept, e.g. those of the
            project's data type.

    Returns:
        The detected file format.

    Raises:
        UnsupportedFormatError: If the extension is missing, unknown, or not
            in ``allowed``.
    """
    ext = PurePath(file_name.replace("\\", "/")).suffix.lower()

    try:
        file_format = FileFormat(ext)
    except ValueError:
        raise UnsupportedFormatError(ext, allowed) from None

    if allowed is not None and file_format.value not in allowed:
        raise UnsupportedFormatError(ext, allowed)

    logger.debug("Format detected", file_name=file_name, format=file_format.name)
    return file_format
