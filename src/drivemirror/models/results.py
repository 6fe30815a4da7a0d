"""Result models for drive and folder creation requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal, Optional

from drivemirror.errors import MirrorDivergenceError

from .records import DriveRecord, FolderRecord


class CreationStage(str, Enum):
    """Progress of a creation request."""

    REQUESTED = "requested"
    REMOTE_CREATED = "remote_created"
    PERMISSIONS_APPLIED = "permissions_applied"
    MIRRORED = "mirrored"
    DONE = "done"
    FAILED = "failed"


GrantStatus = Literal["applied", "skipped"]
StepStatus = Literal["success", "partial", "failed", "not_requested"]


@dataclass(slots=True)
class ManagerOutcome:
    """Result of one organizer grant."""

    email: str
    status: GrantStatus

    permission_id: Optional[str] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


@dataclass(slots=True)
class DriveCreationResult:
    """
    Outcome of SharedDriveManager.create_shared_drive.

    The remote drive always exists when this object is returned; `mirrored`
    tells whether the mirror knows about it.
    """

    drive: DriveRecord
    stage: CreationStage
    applied_managers: list[ManagerOutcome] = field(default_factory=list)
    skipped_managers: list[ManagerOutcome] = field(default_factory=list)
    mirrored: bool = False

    mirror_error_type: Optional[str] = None
    mirror_error_message: Optional[str] = None

    @property
    def applied_emails(self) -> list[str]:
        return [m.email for m in self.applied_managers]

    @property
    def skipped_emails(self) -> list[str]:
        return [m.email for m in self.skipped_managers]

    @property
    def permissions_status(self) -> StepStatus:
        if not self.applied_managers and not self.skipped_managers:
            return "not_requested"
        if not self.skipped_managers:
            return "success"
        if not self.applied_managers:
            return "failed"
        return "partial"

    @property
    def diverged(self) -> bool:
        return not self.mirrored

    def raise_for_divergence(self) -> None:
        """Raise MirrorDivergenceError if the remote drive is not mirrored."""
        if self.mirrored:
            return
        raise MirrorDivergenceError(
            "Shared drive exists remotely but is missing from the mirror",
            result=self,
            details={
                "drive_id": self.drive.id,
                "drive_name": self.drive.name,
                "mirror_error_type": self.mirror_error_type,
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "steps": {
                "remote_create": "success",
                "permissions": self.permissions_status,
                "mirror": "success" if self.mirrored else "failed",
            },
            "drive": {"id": self.drive.id, "name": self.drive.name},
            "applied_managers": [
                {"email": m.email, "permission_id": m.permission_id}
                for m in self.applied_managers
            ],
            "skipped_managers": [
                {"email": m.email, "error_type": m.error_type, "error": m.error_message}
                for m in self.skipped_managers
            ],
            "mirrored": self.mirrored,
            "mirror_error": self.mirror_error_message,
        }


@dataclass(slots=True)
class FolderCreationResult:
    """Outcome of SharedDriveManager.create_folder."""

    folder: FolderRecord
    stage: CreationStage
    mirrored: bool = False
    path_resolved: bool = True

    mirror_error_type: Optional[str] = None
    mirror_error_message: Optional[str] = None

    @property
    def diverged(self) -> bool:
        return not self.mirrored

    def raise_for_divergence(self) -> None:
        """Raise MirrorDivergenceError if the remote folder is not mirrored."""
        if self.mirrored:
            return
        raise MirrorDivergenceError(
            "Folder exists remotely but is missing from the mirror",
            result=self,
            details={
                "folder_id": self.folder.id,
                "drive_id": self.folder.drive_id,
                "mirror_error_type": self.mirror_error_type,
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "steps": {
                "remote_create": "success",
                "full_path": "success" if self.path_resolved else "failed",
                "mirror": "success" if self.mirrored else "failed",
            },
            "folder": {
                "id": self.folder.id,
                "name": self.folder.name,
                "driveId": self.folder.drive_id,
                "parent_id": self.folder.parent_id,
                "full_path": self.folder.full_path,
            },
            "mirrored": self.mirrored,
            "mirror_error": self.mirror_error_message,
        }
