"""Ingestion utilities."""

from .upload_reader import read_upload

__all__ = ["read_upload"]
