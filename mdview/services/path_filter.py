"""Glob include/exclude filter deciding which paths get a Markdown view."""

from typing import Iterable

from mdview.models.config import MarkdownConfig


def normalize_path(path: str) -> str:
    """Ensure a leading slash and drop one trailing slash (except for the root)."""
    if not path.startswith("/"):
        path = "/" + path
    if path != "/" and path.endswith("/"):
        path = path[:-1]
    return path


def _segments(value: str) -> list:
    return [part for part in value.split("/") if part]


def _match(parts: list, pattern: str) -> bool:
    i = 0
    for seg in _segments(pattern):
        if seg == "**":
            return True
        if i >= len(parts):
            return False
        if seg != "*" and seg != parts[i]:
            return False
        i += 1
    return i == len(parts)


def path_matches(path: str, patterns: Iterable[str]) -> bool:
    """Return True when *path* matches any glob in *patterns*.

    ``**`` matches whatever remains of the path (including nothing), ``*``
    matches exactly one segment and anything else must match literally.
    """
    parts = _segments(normalize_path(path))
    return any(_match(parts, pattern) for pattern in patterns)


def is_excluded(path: str, config: MarkdownConfig) -> bool:
    if config.exclude and path_matches(path, config.exclude):
        return True
    if config.include and not path_matches(path, config.include):
        return True
    return False
