"""Data point module for D-LAMA.

Data points are the individual records of a project: a line of text or an
image file, addressed by their index within the project.

Key Components:
- Models: text and image data point tables with a unique index per project
- Repository: index range reads, maximum index lookup, batch insert, edits
  with optimistic locking, and range deletes
- Service and router: upload, read, update and delete endpoints
"""

from .exceptions import DataPointNotFoundError, WrongDataTypeError
from .models import (
    DataPoint,
    DataPointUpdate,
    ImageDataPoint,
    ImageDataPointPublic,
    TextDataPoint,
    TextDataPointPublic,
)

__all__ = [
    "DataPoint",
    "DataPointNotFoundError",
    "DataPointUpdate",
    "ImageDataPoint",
    "ImageDataPointPublic",
    "TextDataPoint",
    "TextDataPointPublic",
    "WrongDataTypeError",
]
