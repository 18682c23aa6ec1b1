"""Shared parser types."""

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, TypeVar

from ..exceptions import EmptyDatasetError

if TYPE_CHECKING:
    from ..schemas import UploadedFile
    from ..staging import ImageStaging

__all__ = ["RawRecord", "RawRecordParser", "ensure_not_empty"]


RawRecord = str | Path

_T = TypeVar("_T")


class RawRecordParser(Protocol):
    def __call__(
        self,
        file: "UploadedFile",
        start_index: int,
        staging: "ImageStaging | None",
    ) -> Sequence[RawRecord]:
        """Parse ``file`` into records in source order."""
        ...


def ensure_not_empty(records: list[_T], file_name: str) -> list[_T]:
    """Return ``records`` unchanged or fail if there are none.

    Raises:
        EmptyDatasetError: If ``records`` is empty.
    """
    if not records:
        raise EmptyDatasetError(f"No usable records found in '{file_name}'")
    return records
