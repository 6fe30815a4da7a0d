"""Drive API field masks used by the controller."""

from __future__ import annotations

# drives.create response
DRIVE_FIELDS: str = ",".join(
    (
        "id",
        "name",
        "kind",
        "colorRgb",
        "backgroundImageFile",
        "capabilities",
        "createdTime",
        "hidden",
        "restrictions",
    )
)

# files.create response for a new folder
FOLDER_FIELDS: str = "id,name,mimeType,parents,createdTime,driveId"

# ancestor walk
METADATA_FIELDS: str = "id,name,parents"

PERMISSION_FIELDS: str = "id,role,type,emailAddress"
