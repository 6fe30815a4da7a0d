"""Firestore mirror of shared drives, folders and manager grants."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from drivemirror.auth import GoogleCredentials
from drivemirror.errors import MirrorError, MirrorWriteError
from drivemirror.hierarchy import FolderNode, materialize_folder_tree, sort_folder_records
from drivemirror.models import DriveRecord, FolderRecord, ManagerGrant
from drivemirror.util.time import now_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")

SHARED_DRIVES: str = "shared_drives"
FOLDERS: str = "folders"
DRIVE_MANAGERS: str = "drive_managers"
SYNC_HISTORY: str = "sync_history"


class FirestoreMirror:
    """
    Read/write access to the Firestore mirror.

    Writes stamp provenance (created_by_frontend, created_at, updated_at)
    at write time and never retry; retry policy belongs to the caller.
    """

    def __init__(
        self,
        credentials: GoogleCredentials,
        *,
        project_id: Optional[str] = None,
        database_id: str = "(default)",
    ) -> None:
        self._db = credentials.build_firestore_client(
            project_id=project_id,
            database_id=database_id,
        )

    @classmethod
    def from_client(cls, client: Any) -> "FirestoreMirror":
        """Create mirror from a pre-built Firestore client (useful for tests)."""
        obj = cls.__new__(cls)
        obj._db = client
        return obj

    # ----------------------------
    # Reads
    # ----------------------------
    def list_shared_drives(self) -> list[DriveRecord]:
        query = self._db.collection(SHARED_DRIVES).order_by("name")
        snapshots = self._read(query.stream, what=SHARED_DRIVES)
        return [DriveRecord.from_document(s.id, s.to_dict() or {}) for s in snapshots]

    def list_folders(self, drive_id: str) -> list[FolderRecord]:
        """Folders of one drive, ordered by full_path then id."""
        query = (
            self._db.collection(FOLDERS)
            .where(filter=FieldFilter("driveId", "==", drive_id))
            .order_by("full_path")
        )
        snapshots = self._read(query.stream, what=FOLDERS)
        records = [FolderRecord.from_document(s.id, s.to_dict() or {}) for s in snapshots]
        return sort_folder_records(records)

    def get_folder(self, folder_id: str) -> Optional[FolderRecord]:
        snapshot = self._read(
            lambda: [self._db.collection(FOLDERS).document(folder_id).get()],
            what=FOLDERS,
        )[0]
        if not snapshot.exists:
            return None
        return FolderRecord.from_document(snapshot.id, snapshot.to_dict() or {})

    def folder_tree(self, drive_id: str) -> list[FolderNode]:
        return materialize_folder_tree(self.list_folders(drive_id))

    def list_managers(self, drive_id: str) -> list[ManagerGrant]:
        query = self._db.collection(DRIVE_MANAGERS).where(
            filter=FieldFilter("driveId", "==", drive_id)
        )
        snapshots = self._read(query.stream, what=DRIVE_MANAGERS)
        return [ManagerGrant.from_document(s.to_dict() or {}) for s in snapshots]

    def list_sync_history(self, limit: int = 10) -> list[dict[str, Any]]:
        """Most recent entries written by the external sync sweep."""
        query = (
            self._db.collection(SYNC_HISTORY)
            .order_by("sync_date", direction=firestore.Query.DESCENDING)
            .limit(limit)
        )
        snapshots = self._read(query.stream, what=SYNC_HISTORY)
        return [{"id": s.id, **(s.to_dict() or {})} for s in snapshots]

    # ----------------------------
    # Writes
    # ----------------------------
    def write_created_drive(
        self,
        drive: DriveRecord,
        managers: Sequence[ManagerGrant] = (),
    ) -> DriveRecord:
        """
        Write a created drive and its manager grants in one batch.

        Either every document lands or none does. Returns a stamped copy of
        the drive; the inputs are left untouched.
        """
        stamp = now_utc()
        stamped = replace(drive, created_by_frontend=True, created_at=stamp, updated_at=stamp)
        grants = [
            replace(g, drive_id=drive.id, drive_name=drive.name, created_at=stamp)
            for g in managers
        ]

        def commit() -> None:
            batch = self._db.batch()
            batch.set(self._db.collection(SHARED_DRIVES).document(drive.id), stamped.to_document())
            for grant in grants:
                batch.set(self._db.collection(DRIVE_MANAGERS).document(), grant.to_document())
            batch.commit()

        self._write(commit, what=SHARED_DRIVES, doc_id=drive.id)
        logger.info(
            "Mirrored shared drive %s (%s) with %d manager(s)",
            drive.name,
            drive.id,
            len(grants),
        )
        return stamped

    def write_created_folder(self, folder: FolderRecord) -> FolderRecord:
        """Write a created folder (single document keyed by its id). Returns a stamped copy."""
        stamp = now_utc()
        stamped = replace(folder, created_by_frontend=True, created_at=stamp, updated_at=stamp)

        self._write(
            lambda: self._db.collection(FOLDERS).document(folder.id).set(stamped.to_document()),
            what=FOLDERS,
            doc_id=folder.id,
        )
        logger.info("Mirrored folder %s (%s)", stamped.full_path, stamped.id)
        return stamped

    # ----------------------------
    # Internals
    # ----------------------------
    def _read(self, func: Callable[[], Iterable[T]], *, what: str) -> list[T]:
        try:
            return list(func())
        except Exception as exc:
            raise MirrorError(
                "Failed to read mirror collection",
                details={"collection": what, "error_type": type(exc).__name__},
                cause=exc,
            ) from exc

    def _write(self, func: Callable[[], Any], *, what: str, doc_id: str) -> None:
        try:
            func()
        except Exception as exc:
            raise MirrorWriteError(
                "Failed to write mirror document",
                details={"collection": what, "doc_id": doc_id, "error_type": type(exc).__name__},
                cause=exc,
            ) from exc
