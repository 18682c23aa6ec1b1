"""Data point models."""

from datetime import datetime
from pathlib import Path
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, UniqueConstraint, func

__all__ = [
    "DataPoint",
    "DataPointUpdate",
    "ImageDataPoint",
    "ImageDataPointPublic",
    "TextDataPoint",
    "TextDataPointPublic",
]


class _DataPointBase(SQLModel):
    """Fields shared by every data point kind.

    The timestamp columns are declared on each table, since a ``Column``
    object can belong to one table only.
    """

    data_point_index: int = Field(
        ge=0, description="Position of the data point within its project."
    )

    version: int = Field(
        default=1, description="Version number, incremented on every edit."
    )


class TextDataPoint(_DataPointBase, table=True):
    """Text data point model."""

    __tablename__ = "text_data_point"
    __table_args__ = (
        UniqueConstraint("project_id", "data_point_index", name="uq_text_dp_index"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        description="Unique identifier for the data point.",
    )

    project_id: UUID = Field(
        foreign_key="project.id", index=True, description="Owning project."
    )

    content: str = Field(description="Text content of the data point.")

    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), insert_default=func.now()),
        description="Timestamp when the data point was created.",
    )

    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), onupdate=func.now(), insert_default=func.now()
        ),
        description="Timestamp when the data point was last updated.",
    )


class ImageDataPoint(_DataPointBase, table=True):
    """Image data point model."""

    __tablename__ = "image_data_point"
    __table_args__ = (
        UniqueConstraint("project_id", "data_point_index", name="uq_image_dp_index"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        description="Unique identifier for the data point.",
    )

    project_id: UUID = Field(
        foreign_key="project.id", index=True, description="Owning project."
    )

    path: str = Field(description="Path of the image file in project storage.")

    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), insert_default=func.now()),
        description="Timestamp when the data point was created.",
    )

    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), onupdate=func.now(), insert_default=func.now()
        ),
        description="Timestamp when the data point was last updated.",
    )


DataPoint = TextDataPoint | ImageDataPoint


class TextDataPointPublic(SQLModel):
    """Text data point as returned by the API."""

    data_point_index: int
    content: str
    version: int
    created_at: datetime | None
    updated_at: datetime | None


class ImageDataPointPublic(SQLModel):
    """Image data point as returned by the API."""

    data_point_index: int
    file_name: str
    version: int
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_model(cls, data_point: ImageDataPoint) -> "ImageDataPointPublic":
        """Expose only the file name, never the server path."""
        return cls(
            data_point_index=data_point.data_point_index,
            file_name=Path(data_point.path).name,
            version=data_point.version,
            created_at=data_point.created_at,
            updated_at=data_point.updated_at,
        )


class DataPointUpdate(SQLModel):
    """Text data point update model."""

    content: str = Field(
        min_length=1, description="New content of the text data point."
    )
