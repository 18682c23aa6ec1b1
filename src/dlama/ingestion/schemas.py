"""Ingestion schemas."""

from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["IngestionResult", "UploadedFile"]


class UploadedFile(BaseModel):
    """An uploaded dataset held in memory for one ingestion call."""

    model_config = ConfigDict(frozen=True)

    file_name: str = Field(description="Client-supplied file name.")

    content: bytes = Field(description="Raw bytes of the upload.", repr=False)

    content_type: str | None = Field(
        default=None, description="Declared content type of the upload."
    )

    @property
    def size(self) -> int:
        """Length of the upload in bytes."""
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-cased extension including the leading dot."""
        return PurePath(self.file_name.replace("\\", "/")).suffix.lower()


class IngestionResult(BaseModel):
    """Outcome of a committed ingestion call."""

    created: int = Field(description="Number of data points created.")

    first_index: int = Field(description="Index assigned to the first data point.")

    last_index: int = Field(description="Index assigned to the last data point.")
