"""Parse ETag header."""

from fastapi import Request

from dlama.common.exceptions import VersionMissingError

__all__ = ["parse_etag"]


def parse_etag(resource_id: str, request: Request) -> int:
    """Return the integer version of an *If-Match* header or raise.

    Both the strong form ``"3"`` and the weak form ``W/"3"`` are accepted.
    """
    value = request.headers.get("If-Match", "").strip().removeprefix("W/")
    if not (len(value) > 1 and value.startswith('"') and value.endswith('"')):
        raise VersionMissingError(resource_id)

    try:
        return int(value.strip('"'))
    except ValueError as exc:
        raise VersionMissingError(resource_id) from exc
