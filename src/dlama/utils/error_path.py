"""Get the path to the error handler module."""

import traceback

from dlama.common.app_error import AppError, ETagError

__all__ = ["get_error_path"]


def get_error_path(err: AppError | ETagError | Exception) -> str:
    """Extract the formatted source location of an error.

    Args:
        err: The raised error carrying a traceback.

    Returns:
        The location as ``"filename:line (fn:function_name)"``, relative to the
        dlama package when the error was raised inside it. ``"unknown"`` if the
        error carries no traceback.
    """
    frames = traceback.extract_tb(err.__traceback__)
    if not frames:
        return "unknown"

    filename, line, func, _ = frames[-1]
    if "dlama" in filename:
        filename = "dlama" + filename.split("dlama")[-1]
    return f"{filename}:{line} (fn:{func})"
