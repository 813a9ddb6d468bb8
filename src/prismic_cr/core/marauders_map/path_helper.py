"""Absolute path helpers.

Paths follow the content repository syntax: ``/`` is the root, segments are
separated by ``/``, a segment may carry one namespace prefix (``ns:name``) and
an optional same-name-sibling index (``name[2]``).
"""

import re

from prismic_cr.core.exceptions import InvalidPath

ROOT_PATH = "/"

# name, optionally prefixed by "ns:", optionally followed by "[n]"
SEGMENT_PATTERN = re.compile(r"^(?:[^/:\[\]*|\s][^/:\[\]*|]*:)?[^/:\[\]*|]+(?:\[[1-9][0-9]*\])?$")


def _path_error(path: object) -> str | None:
    if not isinstance(path, str):
        return f"expected a string, got {type(path).__name__}"
    if not path.startswith("/"):
        return "must start with '/'"
    if path == ROOT_PATH:
        return None
    if path.endswith("/"):
        return "must not end with '/'"
    for segment in path[1:].split("/"):
        if not segment:
            return "empty path segment"
        if segment in (".", ".."):
            return f"relative segment '{segment}'"
        if not SEGMENT_PATTERN.match(segment):
            return f"invalid segment '{segment}'"
    return None


def is_valid_absolute_path(path: object) -> bool:
    """Return True if path is a well-formed absolute path."""
    return _path_error(path) is None


def assert_valid_absolute_path(path: object) -> None:
    """Validate an absolute path.

    Raises:
        InvalidPath: If the path is malformed.
    """
    error = _path_error(path)
    if error is not None:
        raise InvalidPath(path, error)


def get_parent_path(path: str) -> str:
    """Return the parent of an absolute path (the root is its own parent)."""
    assert_valid_absolute_path(path)
    parent = path.rsplit("/", 1)[0]
    return parent or ROOT_PATH


def get_node_name(path: str) -> str:
    """Return the last segment of an absolute path (empty for the root)."""
    assert_valid_absolute_path(path)
    return path.rsplit("/", 1)[1]


__all__ = [
    "ROOT_PATH",
    "assert_valid_absolute_path",
    "is_valid_absolute_path",
    "get_parent_path",
    "get_node_name",
]
