"""drivemirror public API."""

from __future__ import annotations

from drivemirror.auth import AuthInfo, GoogleCredentials, SessionSigner, is_allowed_domain
from drivemirror.config import Settings
from drivemirror.controller import GoogleDriveController
from drivemirror.errors import (
    ApiError,
    AuthError,
    ConflictError,
    DriveMirrorError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidStateError,
    MirrorDivergenceError,
    MirrorError,
    MirrorWriteError,
    NameConflictError,
    NetworkError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    RateLimitError,
    RemoteTimeoutError,
    RemoteUnavailableError,
    SessionError,
    ValidationError,
    map_http_error,
)
from drivemirror.hierarchy import (
    DriveHierarchy,
    FolderNode,
    HierarchyNode,
    HierarchyView,
    NameConflict,
    compose_drive_name,
    materialize_drive_hierarchy,
    materialize_folder_tree,
)
from drivemirror.manager import SharedDriveManager
from drivemirror.mirror import FirestoreMirror
from drivemirror.models import (
    CreationStage,
    DriveCreationResult,
    DriveRecord,
    FolderCreationResult,
    FolderRecord,
    ManagerGrant,
    ManagerOutcome,
)

__all__ = [
    # High-level
    "SharedDriveManager",
    "FirestoreMirror",
    "GoogleDriveController",
    "Settings",
    # Auth
    "AuthInfo",
    "GoogleCredentials",
    "SessionSigner",
    "is_allowed_domain",
    # Hierarchy
    "materialize_folder_tree",
    "materialize_drive_hierarchy",
    "compose_drive_name",
    "FolderNode",
    "HierarchyNode",
    "DriveHierarchy",
    "NameConflict",
    "HierarchyView",
    # Models
    "DriveRecord",
    "FolderRecord",
    "ManagerGrant",
    "ManagerOutcome",
    "CreationStage",
    "DriveCreationResult",
    "FolderCreationResult",
    # Errors
    "DriveMirrorError",
    "ValidationError",
    "InvalidStateError",
    "NameConflictError",
    "AuthError",
    "SessionError",
    "PermissionDeniedError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RemoteUnavailableError",
    "RemoteTimeoutError",
    "NetworkError",
    "RateLimitError",
    "QuotaExceededError",
    "ApiError",
    "MirrorError",
    "MirrorWriteError",
    "MirrorDivergenceError",
    "HttpErrorInfo",
    "map_http_error",
]
