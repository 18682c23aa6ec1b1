"""Text constants for consistent error handling."""

from enum import StrEnum

__all__ = ["ErrorCode", "ErrorNames"]


class ErrorCode(StrEnum):
    """Error codes for standardized error handling."""

    # General errors
    SERVER_ERROR = "SERVER_ERROR"
    NOT_FOUND = "NOT_FOUND"
    VERSION_MISMATCH = "VERSION_MISMATCH"
    VERSION_MISSING = "VERSION_MISSING"

    # Ingestion errors
    INVALID_FILE = "INVALID_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    EMPTY_DATASET = "EMPTY_DATASET"
    MALFORMED_INPUT = "MALFORMED_INPUT"
    STORAGE_ERROR = "STORAGE_ERROR"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"

    # Data point errors
    WRONG_DATA_TYPE = "WRONG_DATA_TYPE"


class ErrorNames(StrEnum):
    """Error names for standardized error handling."""

    INTERNAL_SERVER_ERROR = "Internal server error"

    # File validation errors
    FILE_MISSING_ERROR = "No file provided"
    FILENAME_MISSING_ERROR = "File has no filename"

    # Format errors
    INVALID_UTF8_ERROR = "File is not valid UTF-8 text"
    INVALID_CSV_ERROR = "CSV is malformed near line {value}"
    INVALID_JSON_ERROR = "File is not valid JSON"
    JSON_NOT_ARRAY_ERROR = "JSON dataset must be an array of strings"
    INVALID_ZIP_ERROR = "File is not a valid ZIP archive"
