"""Data type of a project."""

from enum import StrEnum

__all__ = ["ProjectDataType"]


class ProjectDataType(StrEnum):
    """Kind of data points a project holds."""

    TEXT = "text"
    IMAGE = "image"
