"""Helpers for building dataset uploads in tests."""

import io
import zipfile
from collections.abc import Callable, Coroutine
from typing import Any

from dlama.ingestion import UploadedFile
from dlama.project.models import Project

__all__ = ["JPEG_BYTES", "PNG_BYTES", "ProjectFactory", "make_upload", "make_zip"]


ProjectFactory = Callable[..., Coroutine[Any, Any, Project]]


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


def make_upload(file_name: str, content: bytes | str) -> UploadedFile:
    """Build an in-memory upload from text or bytes."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return UploadedFile(file_name=file_name, content=content)


def make_zip(entries: dict[str, bytes]) -> bytes:
    """Build a ZIP archive in memory; names ending in ``/`` become directories."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, data in entries.items():
            if name.endswith("/"):
                archive.writestr(zipfile.ZipInfo(name), b"")
            else:
                archive.writestr(name, data)
    return buffer.getvalue()
