"""Generic utils module."""

from .error_handler import register_exception_handlers
from .error_path import get_error_path
from .etag_parser import parse_etag

__all__ = ["get_error_path", "parse_etag", "register_exception_handlers"]
