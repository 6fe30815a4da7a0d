"""Public mirror exports for drivemirror."""

from __future__ import annotations

from .firestore_mirror import (
    DRIVE_MANAGERS,
    FOLDERS,
    SHARED_DRIVES,
    SYNC_HISTORY,
    FirestoreMirror,
)

__all__ = [
    "FirestoreMirror",
    "SHARED_DRIVES",
    "FOLDERS",
    "DRIVE_MANAGERS",
    "SYNC_HISTORY",
]
