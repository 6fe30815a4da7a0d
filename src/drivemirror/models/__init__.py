"""Public model exports for drivemirror."""

from __future__ import annotations

from .records import FOLDER_MIME, DriveRecord, FolderRecord, ManagerGrant, RemoteItem
from .results import (
    CreationStage,
    DriveCreationResult,
    FolderCreationResult,
    GrantStatus,
    ManagerOutcome,
    StepStatus,
)

__all__ = [
    "FOLDER_MIME",
    "DriveRecord",
    "FolderRecord",
    "ManagerGrant",
    "RemoteItem",
    "CreationStage",
    "GrantStatus",
    "StepStatus",
    "ManagerOutcome",
    "DriveCreationResult",
    "FolderCreationResult",
]
