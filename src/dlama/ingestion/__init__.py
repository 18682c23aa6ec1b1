"""Dataset ingestion pipeline.

Turns one uploaded file into an ordered batch of project data points and
commits it as a single unit.

Key Components:
- Format detection: extension-based selection of the parser family
- Parsers: text (one record per line), CSV (per field or per line), JSON
  arrays of strings, and images (single file or ZIP archive)
- Index allocation: current maximum plus one, serialized per project
- Project storage: per-project image directory with traversal-safe paths
- Staging: per-call staging area with all-or-nothing promotion and rollback
- Orchestration: validate, allocate, parse, persist, promote, commit
"""

from .exceptions import (
    EmptyDatasetError,
    FileTooLargeError,
    MalformedInputError,
    PersistenceError,
    StorageError,
    TooManyFilesError,
    UnsupportedFormatError,
)
from .file_format import FileFormat, FormatKind
from .format_detector import detect_format
from .index_allocator import next_index, project_lock
from .orchestrator import IngestionState, ingest_dataset
from .schemas import IngestionResult, UploadedFile
from .staging import ImageStaging
from .storage import (
    delete_project_directory,
    ensure_project_directory,
    target_path,
)
from .utils import read_upload

__all__ = [
    "EmptyDatasetError",
    "FileFormat",
    "FileTooLargeError",
    "FormatKind",
    "ImageStaging",
    "IngestionResult",
    "IngestionState",
    "MalformedInputError",
    "PersistenceError",
    "StorageError",
    "TooManyFilesError",
    "UnsupportedFormatError",
    "UploadedFile",
    "delete_project_directory",
    "detect_format",
    "ensure_project_directory",
    "ingest_dataset",
    "next_index",
    "project_lock",
    "read_upload",
    "target_path",
]
