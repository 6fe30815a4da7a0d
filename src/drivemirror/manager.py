"""SharedDriveManager: orchestrates remote creation and mirror writes."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from drivemirror.auth import GoogleCredentials
from drivemirror.config import Settings
from drivemirror.controller import GoogleDriveController
from drivemirror.errors import (
    DriveMirrorError,
    MirrorError,
    MirrorWriteError,
    RemoteTimeoutError,
    ValidationError,
)
from drivemirror.hierarchy import DriveHierarchy, FolderNode, materialize_drive_hierarchy
from drivemirror.mirror import FirestoreMirror
from drivemirror.models import (
    CreationStage,
    DriveCreationResult,
    DriveRecord,
    FolderCreationResult,
    FolderRecord,
    ManagerGrant,
    ManagerOutcome,
    RemoteItem,
)
from drivemirror.util.ids import new_request_id
from drivemirror.util.paths import PATH_SEPARATOR, UNKNOWN_PATH, escape_segment, join_full_path
from drivemirror.util.time import now_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SharedDriveManager:
    """
    Create shared drives and folders on Drive and mirror them into Firestore.

    Ordering per request: remote create -> permission grants -> mirror write.
    Nothing is mirrored unless the remote create succeeded.
    """

    def __init__(
        self,
        controller: GoogleDriveController,
        mirror: FirestoreMirror,
        *,
        remote_timeout_sec: float = 30.0,
        max_folder_depth: int = 32,
        concurrent_grants: bool = True,
    ) -> None:
        if remote_timeout_sec <= 0:
            raise ValueError("remote_timeout_sec must be positive")
        if max_folder_depth < 1:
            raise ValueError("max_folder_depth must be >= 1")
        self._controller = controller
        self._mirror = mirror
        self._timeout = remote_timeout_sec
        self._max_folder_depth = max_folder_depth
        self._concurrent_grants = concurrent_grants

    @classmethod
    def from_settings(cls, settings: Settings) -> "SharedDriveManager":
        """Build the Drive controller and Firestore mirror once, from settings."""
        credentials = GoogleCredentials(settings.auth_info())
        return cls(
            GoogleDriveController(credentials),
            FirestoreMirror(
                credentials,
                project_id=settings.GCP_PROJECT_ID,
                database_id=settings.FIRESTORE_DATABASE_ID,
            ),
            remote_timeout_sec=settings.REMOTE_TIMEOUT_SEC,
            max_folder_depth=settings.MAX_FOLDER_DEPTH,
            concurrent_grants=settings.CONCURRENT_GRANTS,
        )

    # ----------------------------
    # Reads (mirror only)
    # ----------------------------
    async def list_shared_drives(self) -> list[DriveRecord]:
        return await self._store(self._mirror.list_shared_drives, error_cls=MirrorError)

    async def drive_hierarchy(self, *, raise_on_conflict: bool = False) -> DriveHierarchy:
        drives = await self.list_shared_drives()
        return materialize_drive_hierarchy(drives, raise_on_conflict=raise_on_conflict)

    async def folder_tree(self, drive_id: str) -> list[FolderNode]:
        return await self._store(self._mirror.folder_tree, drive_id, error_cls=MirrorError)

    async def list_managers(self, drive_id: str) -> list[ManagerGrant]:
        return await self._store(self._mirror.list_managers, drive_id, error_cls=MirrorError)

    async def list_sync_history(self, limit: int = 10) -> list[dict[str, Any]]:
        return await self._store(self._mirror.list_sync_history, limit, error_cls=MirrorError)

    # ----------------------------
    # Creation
    # ----------------------------
    async def create_shared_drive(
        self,
        name: str,
        manager_emails: Iterable[str] | str = (),
    ) -> DriveCreationResult:
        """
        Create a shared drive, grant organizers, then mirror.

        Raises:
            ValidationError: blank name or non-string email, before any remote call.
            DriveMirrorError: the remote create failed; nothing was mirrored.

        Grant failures land in `skipped_managers`. A mirror failure is
        reported through `mirrored=False` (see raise_for_divergence).
        """
        clean_name = _require_name(name, "Shared drive name")
        emails = _normalize_emails(manager_emails)
        request_id = new_request_id()

        logger.info("Creating shared drive %r with %d manager(s)", clean_name, len(emails))
        try:
            drive = await self._remote(
                self._controller.create_shared_drive,
                clean_name,
                request_id=request_id,
            )
        except DriveMirrorError as exc:
            _mark_failed(exc, "remote_create", request_id=request_id, name=clean_name)
            logger.error("Shared drive %r was not created: %s", clean_name, exc)
            raise
        logger.info("Shared drive created: %s (%s)", drive.name, drive.id)

        outcomes = await self._grant_organizers(drive.id, emails)
        result = DriveCreationResult(
            drive=drive,
            stage=CreationStage.PERMISSIONS_APPLIED,
            applied_managers=[o for o in outcomes if o.status == "applied"],
            skipped_managers=[o for o in outcomes if o.status == "skipped"],
        )

        grants = [
            ManagerGrant(
                drive_id=drive.id,
                drive_name=drive.name,
                email=o.email,
                permission_id=o.permission_id or "",
            )
            for o in result.applied_managers
        ]
        try:
            result.drive = await self._store(
                self._mirror.write_created_drive,
                drive,
                grants,
                error_cls=MirrorWriteError,
            )
        except MirrorError as exc:
            result.mirror_error_type = type(exc).__name__
            result.mirror_error_message = str(exc)
            logger.warning(
                "Shared drive %s (%s) exists on Drive but is not mirrored: %s",
                drive.name,
                drive.id,
                exc,
            )
            return result

        result.mirrored = True
        result.stage = CreationStage.DONE
        return result

    async def create_folder(
        self,
        name: str,
        drive_id: str,
        parent_id: Optional[str] = None,
    ) -> FolderCreationResult:
        """
        Create a folder in a shared drive (at its root when parent_id is None).

        Raises:
            ValidationError: blank name or drive id, before any remote call.
            DriveMirrorError: the remote create failed (e.g. NotFoundError
                for an unknown parent); nothing was mirrored.
        """
        clean_name = _require_name(name, "Folder name")
        clean_drive_id = _require_name(drive_id, "Drive id")
        clean_parent = parent_id.strip() if parent_id and parent_id.strip() else None

        logger.info(
            "Creating folder %r in drive %s (parent %s)",
            clean_name,
            clean_drive_id,
            clean_parent or "root",
        )
        try:
            item = await self._remote(
                self._controller.create_folder,
                clean_name,
                clean_drive_id,
                clean_parent,
            )
        except DriveMirrorError as exc:
            _mark_failed(exc, "remote_create", drive_id=clean_drive_id, parent_id=clean_parent)
            logger.error("Folder %r was not created: %s", clean_name, exc)
            raise

        full_path, resolved = await self._resolve_full_path(item, clean_drive_id, clean_parent)
        folder = FolderRecord(
            id=item.file_id,
            name=item.name or clean_name,
            drive_id=clean_drive_id,
            parent_id=clean_parent,
            full_path=full_path,
            parents=list(item.parents),
            created_time=item.created_time or now_utc(),
        )
        result = FolderCreationResult(
            folder=folder,
            stage=CreationStage.REMOTE_CREATED,
            path_resolved=resolved,
        )

        try:
            result.folder = await self._store(
                self._mirror.write_created_folder,
                folder,
                error_cls=MirrorWriteError,
            )
        except MirrorError as exc:
            result.mirror_error_type = type(exc).__name__
            result.mirror_error_message = str(exc)
            logger.warning(
                "Folder %s (%s) exists on Drive but is not mirrored: %s",
                folder.full_path,
                folder.id,
                exc,
            )
            return result

        result.mirrored = True
        result.stage = CreationStage.DONE
        return result

    # ----------------------------
    # Internals
    # ----------------------------
    async def _grant_organizers(self, drive_id: str, emails: list[str]) -> list[ManagerOutcome]:
        if self._concurrent_grants:
            return list(await asyncio.gather(*(self._grant_one(drive_id, e) for e in emails)))
        return [await self._grant_one(drive_id, e) for e in emails]

    async def _grant_one(self, drive_id: str, email: str) -> ManagerOutcome:
        try:
            permission_id = await self._remote(self._controller.add_organizer, drive_id, email)
        except DriveMirrorError as exc:
            logger.warning("Manager %s not added to drive %s: %s", email, drive_id, exc)
            return ManagerOutcome(
                email=email,
                status="skipped",
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
        logger.info("Manager %s added to drive %s", email, drive_id)
        return ManagerOutcome(email=email, status="applied", permission_id=permission_id)

    async def _resolve_full_path(
        self,
        item: RemoteItem,
        drive_id: str,
        parent_id: Optional[str],
    ) -> tuple[str, bool]:
        """
        Compute '/a/b/<name>' for a new folder.

        A mirrored parent with a known path answers in one store read;
        otherwise the Drive parent chain is walked up to the drive root,
        bounded by max_folder_depth and a visited set.
        """
        if parent_id and parent_id != drive_id:
            parent_path = await self._mirrored_parent_path(parent_id, drive_id)
            if parent_path is not None:
                return f"{parent_path}{PATH_SEPARATOR}{escape_segment(item.name)}", True

        names = [item.name]
        visited = {item.file_id}
        current = item.parents[0] if item.parents else None
        while current and current != drive_id:
            if current in visited:
                logger.warning("Parent cycle at %s while resolving %s", current, item.file_id)
                return UNKNOWN_PATH, False
            if len(names) >= self._max_folder_depth:
                logger.warning(
                    "Folder %s is deeper than %d levels; path left unresolved",
                    item.file_id,
                    self._max_folder_depth,
                )
                return UNKNOWN_PATH, False
            visited.add(current)
            try:
                meta = await self._remote(self._controller.get_metadata, current)
            except DriveMirrorError as exc:
                logger.warning("Could not read ancestor %s of %s: %s", current, item.file_id, exc)
                return UNKNOWN_PATH, False
            names.append(meta.name)
            current = meta.parents[0] if meta.parents else None

        names.reverse()
        return join_full_path(names), True

    async def _mirrored_parent_path(self, parent_id: str, drive_id: str) -> Optional[str]:
        try:
            parent = await self._store(self._mirror.get_folder, parent_id, error_cls=MirrorError)
        except MirrorError as exc:
            logger.debug("Mirror lookup of parent %s failed: %s", parent_id, exc)
            return None
        if parent is None or parent.drive_id != drive_id:
            return None
        if not parent.full_path or parent.full_path == UNKNOWN_PATH:
            return None
        return parent.full_path

    async def _remote(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(func, *args, **kwargs),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise RemoteTimeoutError(
                "Drive call timed out",
                details={"call": getattr(func, "__name__", repr(func)), "timeout_sec": self._timeout},
                cause=exc,
            ) from exc

    async def _store(
        self,
        func: Callable[..., T],
        *args: Any,
        error_cls: type[MirrorError],
    ) -> T:
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise error_cls(
                "Mirror call timed out",
                details={"call": getattr(func, "__name__", repr(func)), "timeout_sec": self._timeout},
                cause=exc,
            ) from exc


def _require_name(value: object, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{what} is required", details={"value": value})
    return value.strip()


def _normalize_emails(emails: Iterable[str] | str) -> list[str]:
    """
    Trim, drop blanks and case-insensitive duplicates (first spelling kept).

    A single string is read as a comma-separated list.
    """
    if isinstance(emails, str):
        emails = emails.split(",")
    seen: set[str] = set()
    result: list[str] = []
    for email in emails:
        if not isinstance(email, str):
            raise ValidationError("Manager emails must be strings", details={"value": email})
        clean = email.strip()
        if not clean or clean.casefold() in seen:
            continue
        seen.add(clean.casefold())
        result.append(clean)
    return result


def _mark_failed(exc: DriveMirrorError, step: str, **context: Any) -> None:
    exc.details.setdefault("stage", CreationStage.FAILED.value)
    exc.details.setdefault("step", step)
    for key, value in context.items():
        exc.details.setdefault(key, value)
