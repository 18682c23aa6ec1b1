"""Project module for D-LAMA.

A project owns its data points and, for image projects, a storage directory.
This module holds the project model and the thin create/read/delete surface
the ingestion pipeline needs.
"""

from .data_type import ProjectDataType
from .models import Project, ProjectCreate, ProjectPublic

__all__ = ["Project", "ProjectCreate", "ProjectDataType", "ProjectPublic"]
