"""Parsers turning an uploaded file into ordered raw records.

Every parser shares the signature of ``RawRecordParser``. Text parsers
return stripped, non-blank strings; the image parser writes files into the
staging area and returns the paths they will occupy in project storage.
"""

from typing import Final

from ..file_format import FormatKind
from .base import RawRecord, RawRecordParser
from .image_parser import parse_images
from .json_parser import parse_json_array
from .text_parser import parse_delimited_text

__all__ = [
    "RawRecord",
    "RawRecordParser",
    "get_parser",
    "parse_delimited_text",
    "parse_images",
    "parse_json_array",
]


_PARSERS: Final[dict[FormatKind, RawRecordParser]] = {
    FormatKind.DELIMITED_TEXT: parse_delimited_text,
    FormatKind.JSON_ARRAY: parse_json_array,
    FormatKind.IMAGE: parse_images,
}


def get_parser(kind: FormatKind) -> RawRecordParser:
    """Return the parser registered for a format kind."""
    return _PARSERS[kind]
