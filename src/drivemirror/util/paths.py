"""Folder path helpers for the mirrored `full_path` field."""

from __future__ import annotations

from typing import Sequence

PATH_SEPARATOR: str = "/"

# Stored when the ancestor chain could not be walked.
UNKNOWN_PATH: str = "/unknown"


def escape_segment(name: str) -> str:
    """Escape a folder name so it never contains a bare path separator."""
    return name.replace("\\", "\\\\").replace(PATH_SEPARATOR, "\\" + PATH_SEPARATOR)


def join_full_path(names: Sequence[str]) -> str:
    """Join root-to-leaf folder names into an absolute path (e.g. '/a/b')."""
    return PATH_SEPARATOR + PATH_SEPARATOR.join(escape_segment(n) for n in names)
