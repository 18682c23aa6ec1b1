"""Parse JSON array uploads."""

import codecs
from typing import Any

import orjson
from loguru import logger

from dlama.config.errors import ErrorNames

from ..exceptions import MalformedInputError
from ..schemas import UploadedFile
from .base import ensure_not_empty

__all__ = ["parse_json_array"]


def parse_json_array(file: UploadedFile, *_: Any) -> list[str]:  # noqa: ANN401
    """Parse a JSON array of strings into text records.

    Elements that are not strings (``null`` included) and blank strings are
    skipped; the rest are stripped.

    Args:
        file: The uploaded file.
        *_: Start index and staging area (ignored).

    Returns:
        Records in array order.

    Raises:
        MalformedInputError: If the content is not JSON or not an array.
        EmptyDatasetError: If no record remains.
    """
    try:
        payload = orjson.loads(file.content.removeprefix(codecs.BOM_UTF8))
    except orjson.JSONDecodeError as e:
        raise MalformedInputError(ErrorNames.INVALID_JSON_ERROR) from e

    if not isinstance(payload, list):
        raise MalformedInputError(ErrorNames.JSON_NOT_ARRAY_ERROR)

    records = [
        stripped
        for element in payload
        if isinstance(element, str) and (stripped := element.strip())
    ]

    skipped = len(payload) - len(records)
    logger.debug(
        "JSON records parsed",
        file_name=file.file_name,
        count=len(records),
        skipped=skipped,
    )
    return ensure_not_empty(records, file.file_name)
