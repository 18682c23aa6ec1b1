"""Project models."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel, func

from .data_type import ProjectDataType

__all__ = ["Project", "ProjectCreate", "ProjectPublic"]


class _ProjectBase(SQLModel):
    """Base Project model."""

    name: str = Field(description="Name of the project.", min_length=1, max_length=128)

    description: str = Field(
        default="", description="Description of the project.", max_length=1024
    )

    data_type: ProjectDataType = Field(
        description="Kind of data points the project holds (text or image)."
    )


class ProjectCreate(_ProjectBase):
    """Project creation model."""


class ProjectPublic(_ProjectBase):
    """Project model for detailed view."""

    id: UUID = Field(description="Unique identifier for the project.")

    version: int = Field(description="Version number of the project.")

    created_at: datetime | None = Field(
        default=None, description="Timestamp when the project was created."
    )


class Project(_ProjectBase, table=True):
    """Project model."""

    __tablename__ = "project"

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        description="Unique identifier for the project.",
    )

    version: int = Field(default=0, description="Version number of the project.")

    storage_path: str | None = Field(
        default=None,
        description="Directory holding the image files of an image project.",
    )

    created_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), insert_default=func.now()),
        description="Timestamp when the project was created.",
    )

    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), onupdate=func.now(), insert_default=func.now()
        ),
        description="Timestamp when the project was last updated.",
    )
