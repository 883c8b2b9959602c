"""
Item path helpers.

Paths inside a drive are '/'-separated. Callers may pass them with or
without a leading separator; request targets are composed from the
normalized form.
"""
from typing import Optional
from urllib.parse import quote

from .exceptions import DriveInputError


SEPARATOR = '/'


def normalize_item_path(path: Optional[str]) -> str:
    """
    Canonicalize a user-supplied item path.

    Strips surrounding whitespace and a single leading separator.

    Args:
        path: Path as given by the caller ('/docs/report.pdf', 'docs/')

    Returns:
        Normalized path ('docs/report.pdf')

    Raises:
        DriveInputError: If the path is empty, blank or only a separator
    """
    if path is None or not isinstance(path, str) or not path.strip():
        raise DriveInputError("Path is required", error_code='EMPTY_PATH')

    normalized = path.strip()
    if normalized.startswith(SEPARATOR):
        normalized = normalized[1:]

    if not normalized.strip(SEPARATOR).strip():
        raise DriveInputError(f"Path is empty after normalization: {path!r}", error_code='EMPTY_PATH')

    return normalized


def quote_item_path(normalized: str) -> str:
    """Percent-encode a normalized path for use in a URL, keeping separators."""
    return quote(normalized, safe=SEPARATOR)


def join_item_path(base: Optional[str], *parts: str) -> str:
    """
    Join a directory prefix and sub-paths.

    Duplicate separators at the joints are collapsed; the result keeps
    the leading separator of `base` (or gains one if base is empty).

    Example:
        >>> join_item_path('/up', 'a/1.txt')
        '/up/a/1.txt'
        >>> join_item_path('/up/', '/b/2.txt')
        '/up/b/2.txt'
    """
    result = (base or SEPARATOR).rstrip(SEPARATOR)
    for part in parts:
        part = part.strip(SEPARATOR)
        if part:
            result = f"{result}{SEPARATOR}{part}"
    if not result.startswith(SEPARATOR):
        result = f"{SEPARATOR}{result}"
    return result
