"""Data models for mirrored drives, folders and manager grants."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from drivemirror.util.time import coerce_datetime, to_rfc3339

FOLDER_MIME: str = "application/vnd.google-apps.folder"

# Provenance fields stamped by the mirror writer.
_PROVENANCE_KEYS: tuple[str, ...] = ("created_by_frontend", "created_at", "updated_at")

_DRIVE_KEYS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "kind",
        "hidden",
        "restrictions",
        "capabilities",
        "createdTime",
        "colorRgb",
        "backgroundImageFile",
        *_PROVENANCE_KEYS,
    }
)


@dataclass(slots=True)
class DriveRecord:
    """
    A shared drive as seen by the mirror.

    Notes:
        - `name` doubles as a nominal hierarchy ("Sales | 2024").
        - Fields written by an external sync sweep (lastSync, status, ...)
          are kept in `extra` and written back unchanged.
    """

    id: str
    name: str

    hidden: bool = False
    restrictions: dict[str, Any] = field(default_factory=dict)
    capabilities: dict[str, Any] = field(default_factory=dict)
    created_time: Optional[datetime] = None
    kind: Optional[str] = None
    color_rgb: Optional[str] = None
    background_image_file: Optional[dict[str, Any]] = None

    created_by_frontend: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Mapping[str, Any]) -> DriveRecord:
        """Build from a Drive API `drives` resource."""
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            hidden=bool(data.get("hidden", False)),
            restrictions=_dict(data.get("restrictions")),
            capabilities=_dict(data.get("capabilities")),
            created_time=coerce_datetime(data.get("createdTime")),
            kind=_opt_str(data.get("kind")),
            color_rgb=_opt_str(data.get("colorRgb")),
            background_image_file=data.get("backgroundImageFile") or None,
        )

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> DriveRecord:
        """Build from a `shared_drives` document."""
        record = cls.from_api({**data, "id": data.get("id") or doc_id})
        record.created_by_frontend = bool(data.get("created_by_frontend", False))
        record.created_at = coerce_datetime(data.get("created_at"))
        record.updated_at = coerce_datetime(data.get("updated_at"))
        record.extra = {k: v for k, v in data.items() if k not in _DRIVE_KEYS}
        return record

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = dict(self.extra)
        doc.update(
            {
                "id": self.id,
                "name": self.name,
                "kind": self.kind,
                "hidden": self.hidden,
                "restrictions": dict(self.restrictions),
                "capabilities": dict(self.capabilities),
                "createdTime": to_rfc3339(self.created_time) if self.created_time else None,
                "colorRgb": self.color_rgb,
                "backgroundImageFile": self.background_image_file,
            }
        )
        _put_provenance(doc, self.created_by_frontend, self.created_at, self.updated_at)
        return doc


@dataclass(slots=True)
class FolderRecord:
    """
    A folder inside a shared drive.

    `parent_id` is None (or the drive id) for folders created at the drive
    root. `full_path` is computed once at creation and never edited.
    """

    id: str
    name: str
    drive_id: str
    parent_id: Optional[str] = None
    full_path: str = ""

    mime_type: str = FOLDER_MIME
    parents: list[str] = field(default_factory=list)
    created_time: Optional[datetime] = None

    created_by_frontend: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> FolderRecord:
        """Build from a `folders` document."""
        parents = data.get("parents")
        return cls(
            id=_str(data.get("id")) or doc_id,
            name=_str(data.get("name")),
            drive_id=_str(data.get("driveId")),
            parent_id=_opt_str(data.get("parent_id")),
            full_path=_str(data.get("full_path")),
            mime_type=_str(data.get("mimeType")) or FOLDER_MIME,
            parents=list(parents) if isinstance(parents, list) else [],
            created_time=coerce_datetime(data.get("createdTime")),
            created_by_frontend=bool(data.get("created_by_frontend", False)),
            created_at=coerce_datetime(data.get("created_at")),
            updated_at=coerce_datetime(data.get("updated_at")),
        )

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "mimeType": self.mime_type,
            "parents": list(self.parents),
            "driveId": self.drive_id,
            "parent_id": self.parent_id,
            "full_path": self.full_path,
            "createdTime": to_rfc3339(self.created_time) if self.created_time else None,
        }
        _put_provenance(doc, self.created_by_frontend, self.created_at, self.updated_at)
        return doc


@dataclass(slots=True)
class ManagerGrant:
    """An organizer permission granted on a shared drive."""

    drive_id: str
    drive_name: str
    email: str
    permission_id: str
    role: str = "organizer"
    type: str = "user"
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, data: Mapping[str, Any]) -> ManagerGrant:
        return cls(
            drive_id=_str(data.get("driveId")),
            drive_name=_str(data.get("driveName")),
            email=_str(data.get("email")),
            permission_id=_str(data.get("permissionId")),
            role=_str(data.get("role")) or "organizer",
            type=_str(data.get("type")) or "user",
            created_at=coerce_datetime(data.get("created_at")),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "driveId": self.drive_id,
            "driveName": self.drive_name,
            "email": self.email,
            "role": self.role,
            "type": self.type,
            "permissionId": self.permission_id,
            "created_at": self.created_at,
        }


@dataclass(slots=True)
class RemoteItem:
    """Minimal Drive file metadata used for folder creation and path walks."""

    file_id: str
    name: str
    mime_type: str = ""
    parents: list[str] = field(default_factory=list)
    created_time: Optional[datetime] = None


def _put_provenance(
    doc: dict[str, Any],
    created_by_frontend: bool,
    created_at: Optional[datetime],
    updated_at: Optional[datetime],
) -> None:
    if created_by_frontend:
        doc["created_by_frontend"] = True
    if created_at is not None:
        doc["created_at"] = created_at
    if updated_at is not None:
        doc["updated_at"] = updated_at


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _dict(value: Any) -> dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}
