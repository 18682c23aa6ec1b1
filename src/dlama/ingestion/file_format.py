"""File formats accepted for datasets."""

from enum import StrEnum

__all__ = ["FileFormat", "FormatKind"]


class FileFormat(StrEnum):
    """Supported upload extensions."""

    # No abbreviation to preserve extension names
    TXT = ".txt"
    CSV = ".csv"
    JSON = ".json"
    ZIP = ".zip"
    JPG = ".jpg"
    JPEG = ".jpeg"
    PNG = ".png"

    @property
    def kind(self) -> "FormatKind":
        """Parser family handling this extension."""
        return _KINDS[self]


class FormatKind(StrEnum):
    """Parser family selected for an upload."""

    DELIMITED_TEXT = "delimited_text"
    JSON_ARRAY = "json_array"
    IMAGE = "image"


_KINDS = {
    FileFormat.TXT: FormatKind.DELIMITED_TEXT,
    FileFormat.CSV: FormatKind.DELIMITED_TEXT,
    FileFormat.JSON: FormatKind.JSON_ARRAY,
    FileFormat.ZIP: FormatKind.IMAGE,
    FileFormat.JPG: FormatKind.IMAGE,
    FileFormat.JPEG: FormatKind.IMAGE,
    FileFormat.PNG: FormatKind.IMAGE,
}
