"""Parse plain text and CSV uploads."""

import csv
import io
from typing import Any

from loguru import logger

from dlama.config import settings
from dlama.config.errors import ErrorNames

from ..exceptions import MalformedInputError
from ..file_format import FileFormat
from ..schemas import UploadedFile
from .base import ensure_not_empty

__all__ = ["decode_utf8", "parse_delimited_text"]


def parse_delimited_text(file: UploadedFile, *_: Any) -> list[str]:  # noqa: ANN401
    """Parse a ``.txt`` or ``.csv`` upload into text records.

    A ``.txt`` file yields one record per line. A ``.csv`` file yields one
    record per field when ``csv_split_mode`` is ``field``, otherwise one per
    line. Records are stripped and blank ones dropped.

    Args:
        file: The uploaded file.
        *_: Start index and staging area (ignored).

    Returns:
        Records in source order.

    Raises:
        MalformedInputError: If the bytes are not UTF-8 or the CSV is malformed.
        EmptyDatasetError: If no record remains.
    """
    text = decode_utf8(file)

    if file.extension == FileFormat.CSV and settings.csv_split_mode == "field":
        records = _split_fields(text)
    else:
        records = _split_lines(text)

    logger.debug("Text records parsed", file_name=file.file_name, count=len(records))
    return ensure_not_empty(records, file.file_name)


def decode_utf8(file: UploadedFile) -> str:
    """Decode an upload as UTF-8, tolerating a byte order mark.

    Raises:
        MalformedInputError: If the bytes are not valid UTF-8.
    """
    try:
        return file.content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedInputError(ErrorNames.INVALID_UTF8_ERROR) from e


def _split_lines(text: str) -> list[str]:
    return [
        stripped
        for line in io.StringIO(text, newline=None)
        if (stripped := line.strip())
    ]


def _split_fields(text: str) -> list[str]:
    reader = csv.reader(
        io.StringIO(text, newline=""), delimiter=settings.csv_delimiter, strict=True
    )
    records: list[str] = []
    try:
        for row in reader:
            records.extend(stripped for field in row if (stripped := field.strip()))
    except csv.Error as e:
        raise MalformedInputError(
            ErrorNames.INVALID_CSV_ERROR.format(value=reader.line_num)
        ) from e
    return records
